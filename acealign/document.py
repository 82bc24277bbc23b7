# License: BSD3

# disable "pointless string" warning because we want attribute docstrings
# pylint: disable=W0105
# pylint: disable=too-few-public-methods

"""
Documents, their sections, and the sentences and tokens placed inside
them.

A `Document` starts life with its canonical text and its sections only;
`acealign.placement` fills the sections in with sentences, each
carrying a `Tokenization`.
"""

import itertools
import uuid

from .util import concat


class Token(object):
    """
    A word token in a tokenization
    """
    def __init__(self, index, text, span):
        self.index = index
        "position within its sentence (0-based)"

        self.text = text
        self.span = span
        "half-open character span"

    def __str__(self):
        return '%d:%s\t%s' % (self.index, self.text, self.span)

    def __repr__(self):
        return 'Token(%d, %r, %r)' % (self.index, self.text, self.span)


class Tokenization(object):
    """
    The ordered tokens of a single sentence, with an identifier
    that token references point to
    """
    def __init__(self, tid, tokens):
        self.tid = tid
        self.tokens = tokens

    def __len__(self):
        return len(self.tokens)

    def __iter__(self):
        return iter(self.tokens)


class Sentence(object):
    """
    A sentence, from the start of its first token to the end of its
    last one
    """
    def __init__(self, sid, span, tokenization):
        self.sid = sid
        self.span = span
        self.tokenization = tokenization

    def __str__(self):
        return '%s %s' % (self.sid, self.span)


class Section(object):
    """
    A stretch of the document that sentences are placed into.
    Sections are not assumed to be disjoint.
    """
    def __init__(self, sid, span, kind=None):
        self.sid = sid
        self.span = span
        self.kind = kind
        "name of the markup element it comes from (if any)"

        self.sentences = []
        "filled in by sentence placement"

    def __str__(self):
        return '%s [%s] %s' % (self.sid, self.kind, self.span)


class Document(object):
    """
    Canonical text of a document and its ordered sections
    """
    def __init__(self, doc_id, text, sections):
        self.doc_id = doc_id
        self.text = text
        self.sections = sections

    def sentences(self):
        """
        All placed sentences, in document order
        """
        return concat(s.sentences for s in self.sections)

    def tokenizations(self):
        """
        All tokenizations, in document order
        """
        return (s.tokenization for s in self.sentences())

    def tokenization(self, tid):
        """
        The tokenization with the given identifier (KeyError if none)
        """
        for tkn in self.tokenizations():
            if tkn.tid == tid:
                return tkn
        raise KeyError(tid)

    def substring(self, span):
        """
        Text covered by a (half-open) span
        """
        return self.text[span.char_start:span.char_end]


# ---------------------------------------------------------------------
# identifiers
# ---------------------------------------------------------------------


class UuidGenerator(object):
    """
    Fresh random identifiers; two runs on the same input will not
    share any
    """
    def __next__(self):
        "a new identifier"
        return str(uuid.uuid4())

    def __iter__(self):
        return self


class CounterGenerator(object):
    """
    Deterministic identifiers `prefix-1`, `prefix-2`, ...
    """
    def __init__(self, prefix='id'):
        self.prefix = prefix
        self._counter = itertools.count(1)

    def __next__(self):
        "a new identifier"
        return '%s-%d' % (self.prefix, next(self._counter))

    def __iter__(self):
        return self
