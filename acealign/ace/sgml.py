# License: BSD3

"""
Source documents of the ACE corpus (`.sgm`)

ACE character offsets count characters of the `.sgm` file once all
markup tags are removed; character entities such as `&amp;` are *not*
unescaped (they count for five characters). The canonical text of a
document follows the same convention.

Sections are the stretches of character data between two tags which
contain anything other than whitespace (trimmed of surrounding
whitespace). Each is labelled with its innermost enclosing element,
eg. `HEADLINE`, `SPEAKER`, `TURN`, `P`.
"""

import codecs
import logging
import os
import re

from acealign.annotation import Span
from acealign.document import Document, Section

_logger = logging.getLogger(__name__)

_TAG_RE = re.compile(r'<(/?)\s*([^\s>/]*)[^>]*?(/?)>')


def _strip_run(text, start, end):
    """
    Span of `text[start:end]` without its leading and trailing
    whitespace (None if nothing is left)
    """
    chunk = text[start:end]
    lstripped = chunk.lstrip()
    if not lstripped:
        return None
    new_start = start + len(chunk) - len(lstripped)
    new_end = end - (len(chunk) - len(chunk.rstrip()))
    return Span(new_start, new_end)


def read_sgm(sgm, doc_id=None, ids=None):
    """
    Canonical text and sections of an ACE source document

    Parameters
    ----------
    sgm : str
        Contents of the `.sgm` file
    doc_id : str, optional
        Document id (taken from the DOCID element if not given)
    ids : iterator of str, optional
        Section identifiers (default: `section-0`, `section-1`, ...)

    Returns
    -------
    doc : acealign.document.Document
        Document with sections but no sentences yet
    """
    pieces = []
    stack = []
    runs = []  # (start, end, kind) in the canonical text
    length = 0
    last = 0
    for match in _TAG_RE.finditer(sgm):
        data = sgm[last:match.start()]
        if data:
            pieces.append(data)
            runs.append((length, length + len(data),
                         stack[-1] if stack else None))
            length += len(data)
        last = match.end()
        closing, name, selfclosing = match.groups()
        name = name.upper()
        if closing:
            if name in stack:
                while stack.pop() != name:
                    pass
        elif not selfclosing and name and name[0] not in '!?':
            stack.append(name)
    data = sgm[last:]
    if data:
        pieces.append(data)
        runs.append((length, length + len(data),
                     stack[-1] if stack else None))
    text = ''.join(pieces)

    sections = []
    for start, end, kind in runs:
        span = _strip_run(text, start, end)
        if span is None:
            continue
        sid = next(ids) if ids is not None else 'section-%d' % len(sections)
        sections.append(Section(sid, span, kind))

    if doc_id is None:
        doc_id = _find_docid(text, sections)
    _logger.debug('%s: %d characters, %d sections', doc_id, len(text),
                  len(sections))
    return Document(doc_id, text, sections)


def _find_docid(text, sections):
    for section in sections:
        if section.kind == 'DOCID':
            return text[section.span.char_start:section.span.char_end]
    return None


def read_sgm_file(fname, ids=None):
    """
    Read an ACE source document (see `read_sgm`); if it has no DOCID
    element, the file name (minus `.sgm`) is the document id
    """
    with codecs.open(fname, 'r', 'utf-8') as stream:
        sgm = stream.read()
    doc = read_sgm(sgm, ids=ids)
    if doc.doc_id is None:
        bname = os.path.basename(fname)
        doc.doc_id = bname[:-4] if bname.endswith('.sgm') else bname
    return doc
