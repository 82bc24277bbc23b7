# License: BSD3

"""
Aligning annotated character sequences with tokens.

An annotation (`acealign.annotation.CharSeq`, inclusive on both ends)
is mapped onto a contiguous range of token indices within a single
tokenization. We make one pass over every token of the document:

* the first token containing the start character gives the start
  of the range (and the tokenization),
* every token containing the end character moves the (exclusive) end
  of the range; we never stop early.

An end found before any start, or an end in another tokenization than
the start, is an error. Spans which cross sentences tell us that the
annotations and the tokenization disagree; we refuse to guess.
"""

import logging

from .annotation import Span, unescape_amp
from .internalutil import AceAlignException, TRACE

_logger = logging.getLogger(__name__)

END_BEFORE_START = 'end found before start'
CROSSES_SENTENCES = 'span crosses sentence boundary'
UNMATCHED = 'span unmatched'


class AlignmentError(AceAlignException):
    """
    An annotated span could not be mapped onto a token range
    """
    def __init__(self, reason, charseq):
        self.reason = reason
        "one of `END_BEFORE_START`, `CROSSES_SENTENCES`, `UNMATCHED`"

        self.charseq = charseq
        super(AlignmentError, self).__init__('%s: %s' % (reason, charseq))


class TokenRefSequence(object):
    """
    A contiguous range of tokens `[start, end)` in one tokenization,
    optionally with an anchor token (most representative token of
    the range, eg. the head word of a noun phrase)
    """
    def __init__(self, tokenization_id, start, end, anchor=None):
        self.tokenization_id = tokenization_id
        self.start = start
        self.end = end
        self.anchor = anchor

    def __repr__(self):
        return 'TokenRefSequence(%r, %d, %d, anchor=%r)' %\
            (self.tokenization_id, self.start, self.end, self.anchor)

    def __eq__(self, other):
        return isinstance(other, TokenRefSequence) and\
            self._tuple() == other._tuple()

    def __ne__(self, other):
        return not self == other

    def __hash__(self):
        return hash(self._tuple())

    def _tuple(self):
        return (self.tokenization_id, self.start, self.end, self.anchor)

    def indices(self):
        "token indices covered, in order"
        return list(range(self.start, self.end))

    def last(self):
        "index of the last token in the range"
        return self.end - 1

    def with_anchor(self, anchor):
        "copy of this range with the given anchor token index"
        return TokenRefSequence(self.tokenization_id, self.start, self.end,
                                anchor=anchor)


def _in_context(tokenization, start, end):
    """
    Tokens of a tokenization with the aligned range in brackets
    """
    words = []
    for tok in tokenization:
        word = tok.text
        if tok.index == start:
            word = '(' + word
        if tok.index + 1 == end:
            word = word + ')'
        words.append(word)
    return ' '.join(words)


def align(doc, charseq, log_mismatch=False):
    """
    Map an annotated character sequence onto the tokens of a document.

    Parameters
    ----------
    doc : acealign.document.Document
        Document with placed sentences
    charseq : acealign.annotation.CharSeq
        Annotated span (inclusive on both ends)
    log_mismatch : boolean
        Log (at debug level) when the text covered by the aligned
        tokens differs from the annotated text

    Returns
    -------
    tokens : TokenRefSequence

    Raises
    ------
    AlignmentError
    """
    tokenization_id = None
    start = -1  # inclusive token index
    end = -1  # exclusive token index
    start_char = -1
    end_char = -1

    for tokenization in doc.tokenizations():
        for tok in tokenization:
            if start == -1 and tok.span.contains_offset(charseq.char_start):
                start = tok.index
                start_char = tok.span.char_start
                tokenization_id = tokenization.tid
            if tok.span.contains_offset(charseq.char_end):
                # not necessarily the last token that contains it;
                # keep going in case the next one does too
                end = tok.index + 1
                end_char = tok.span.char_end
                if start == -1:
                    raise AlignmentError(END_BEFORE_START, charseq)
                if tokenization_id != tokenization.tid:
                    raise AlignmentError(CROSSES_SENTENCES, charseq)

    if tokenization_id is None or end == -1:
        raise AlignmentError(UNMATCHED, charseq)

    if log_mismatch and _logger.isEnabledFor(logging.DEBUG):
        d_text = doc.substring(Span(start_char, end_char))
        if unescape_amp(d_text) != charseq.text:
            _logger.debug('Mismatch between annotated span and tokens '
                          '(annotation / tokens): %s\t%s',
                          charseq.text.replace('\n', '\\n'),
                          d_text.replace('\n', '\\n'))
    if _logger.isEnabledFor(TRACE):
        _logger.log(TRACE, 'Extent (%s) in context: %s', charseq.text,
                    _in_context(doc.tokenization(tokenization_id),
                                start, end))

    return TokenRefSequence(tokenization_id, start, end)
