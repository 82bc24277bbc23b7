# License: BSD3

"""
Read-only sanity check: does the text annotators saw match the
document text at the annotated offsets?

Mismatches are reported, never raised. They point to drift between
the annotations and the source text rather than to anything we
could fix here.
"""

from collections import namedtuple
import logging

from .annotation import CharSeq, unescape_amp
from .internalutil import TRACE

_logger = logging.getLogger(__name__)


class Mismatch(namedtuple('Mismatch', 'mention_id charseq doc_text')):
    """
    An entity mention whose extent text differs from the document

    :param doc_text: document substring at the extent (after
                     unescaping ampersands)
    """
    def __str__(self):
        return '%s %s\t"%s"' % (self.mention_id, self.charseq,
                                self.doc_text.replace('\n', '\\n'))


def check_entity_mentions(apf_doc, text):
    """
    Compare each entity mention extent with the document text.

    Mentions are visited in order of `(start, end, id)`.

    Parameters
    ----------
    apf_doc : acealign.ace.apf.AceDocument
    text : str
        Canonical document text

    Returns
    -------
    mismatches : [Mismatch]
    """
    def key(mention):
        "sort key"
        extent = mention.extent
        return (extent.char_start, extent.char_end, mention.id)

    mismatches = []
    for mention in sorted(apf_doc.entity_mentions.values(), key=key):
        span = mention.extent.to_span()
        d_text = unescape_amp(text[span.char_start:span.char_end])
        if CharSeq.from_span(span, d_text) == mention.extent:
            _logger.log(TRACE, 'Entity mention: aExt=%s dText=%s',
                        mention.extent, d_text)
        else:
            _logger.warning('Mismatched entity mention: aExt=%s dText=%s',
                            mention.extent, d_text)
            mismatches.append(Mismatch(mention.id, mention.extent, d_text))
    return mismatches
