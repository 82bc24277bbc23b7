#!/usr/bin/env python
# -*- coding: utf-8 -*-
#
# License: BSD3

"""
Token streams: ordered sentences of word tokens with character offsets.

Tokens either come from an nltk based tokenizer run over the document
sections (`tokenize`), or from a pre-tokenized file whose offsets are
recovered by walking the document text (`read_token_file` and
`token_spans`).

Token files are assumed to be UTF-8 encoded, one token per line (extra
columns are ignored), with a blank line between sentences.
"""

from itertools import islice
import codecs
import logging

from nltk.tokenize import PunktSentenceTokenizer, WordPunctTokenizer

from acealign.annotation import Span
from acealign.internalutil import AceAlignException, TRACE

# I don't yet see how "too few public methods" is helpful
# pylint: disable=R0903

_logger = logging.getLogger(__name__)


class TokenizerException(AceAlignException):
    """
    Exceptions that arise during tokenization or when reading
    token files
    """
    def __init__(self, *args, **kw):
        super(TokenizerException, self).__init__(*args, **kw)

# ---------------------------------------------------------------------
# tokens
# ---------------------------------------------------------------------


class WordToken(object):
    """
    A word and its (half-open) character span in the document
    """
    def __init__(self, word, span):
        self.word = word
        self.span = span

    def __str__(self):
        return '%s\t%s' % (self.word, self.span)

    def __repr__(self):
        return 'WordToken(%r, %r)' % (self.word, self.span)

    @property
    def start(self):
        "offset of first character"
        return self.span.char_start

    @property
    def end(self):
        "offset after last character"
        return self.span.char_end


def sentence_span(sentence):
    """
    Span from the start of the first token of a sentence to the end
    of its last (None for an empty sentence)
    """
    if not sentence:
        return None
    return Span.merge_all(tok.span for tok in sentence)


# ---------------------------------------------------------------------
# nltk tokenizer
# ---------------------------------------------------------------------

_SENT_TOKENIZER = PunktSentenceTokenizer()
_WORD_TOKENIZER = WordPunctTokenizer()


def tokenize(text, spans):
    """
    Sentence split and word tokenize each of the given spans of
    `text` separately, so that no sentence crosses from one span into
    the next.

    Parameters
    ----------
    text : str
        Document text
    spans : iterable of Span
        Regions of the text to tokenize (typically section spans)

    Returns
    -------
    sentences : list of list of WordToken
        Non-empty sentences, in document order
    """
    sentences = []
    for span in spans:
        chunk = text[span.char_start:span.char_end]
        for s_start, s_end in _SENT_TOKENIZER.span_tokenize(chunk):
            sent_txt = chunk[s_start:s_end]
            offset = span.char_start + s_start
            sentence = [WordToken(sent_txt[w_start:w_end],
                                  Span(offset + w_start, offset + w_end))
                        for w_start, w_end
                        in _WORD_TOKENIZER.span_tokenize(sent_txt)]
            if sentence:
                sentences.append(sentence)
    _logger.debug('%d sentences, %d tokens', len(sentences),
                  sum(len(s) for s in sentences))
    return sentences


# ---------------------------------------------------------------------
# gold boundaries
# ---------------------------------------------------------------------


def _split_token(token, cuts):
    """
    Split a token at the given offsets (only those falling strictly
    inside the token are used)
    """
    inner = sorted(x for x in cuts if token.start < x < token.end)
    if not inner:
        return [token]
    bounds = [token.start] + inner + [token.end]
    pieces = []
    for left, right in zip(bounds, bounds[1:]):
        word = token.word[left - token.start:right - token.start]
        pieces.append(WordToken(word, Span(left, right)))
    _logger.log(TRACE, 'split token %s into %s', token,
                ' '.join(p.word for p in pieces))
    return pieces


def respect_mentions(sentences, spans, limits=None):
    """
    Adjust a token stream so that annotated spans start and end on
    token boundaries and do not straddle sentences.

    * tokens which have a span boundary strictly inside them are split
    * consecutive sentences are merged when a span starts in one and
      ends in the other, unless they fall in different `limits`
      (typically section spans) in which case no merging happens

    Parameters
    ----------
    sentences : list of list of WordToken
    spans : iterable of Span
        Half-open spans that should be respected
    limits : iterable of Span, optional
        Sentences in different limits are never merged

    Returns
    -------
    sentences : list of list of WordToken
        A new token stream
    """
    spans = [x for x in spans if x.length() > 0]
    cuts = set()
    for span in spans:
        cuts.add(span.char_start)
        cuts.add(span.char_end)

    split = [[piece for tok in sent for piece in _split_token(tok, cuts)]
             for sent in sentences if sent]

    limits = list(limits or [])

    def limit_of(sentence):
        "index of the first limit enclosing the sentence, or None"
        sspan = sentence_span(sentence)
        for i, lim in enumerate(limits):
            if lim.encloses(sspan):
                return i
        return None

    def straddles(left, right):
        "true if some span starts in `left` and ends in `right`"
        boundary = right[0].start
        lspan = sentence_span(left)
        return any(x.char_start < boundary and
                   lspan.char_start <= x.char_start < lspan.char_end and
                   x.char_end > boundary
                   for x in spans)

    merged = []
    for sent in split:
        if merged and straddles(merged[-1], sent) and\
                limit_of(merged[-1]) == limit_of(sent):
            _logger.debug('merging sentences at %d to keep annotated '
                          'spans whole', sent[0].start)
            merged[-1] = merged[-1] + sent
        else:
            merged.append(sent)
    return merged


# ---------------------------------------------------------------------
# token files
# ---------------------------------------------------------------------


def read_token_file(fname):
    """
    Return a list of lists of words (one list per sentence)
    """
    segment = []
    segments = []
    with codecs.open(fname, 'r', 'utf-8') as stream:
        for line in stream:
            spl = line.split()
            if spl:
                segment.append(spl[0])
            elif segment:
                segments.append(segment)
                segment = []
    if segment:
        segments.append(segment)
    return segments


def generic_token_spans(text, tokens, offset=0):
    """
    Given a string and a sequence of substrings within that string,
    infer a span for each of the substrings.

    We do this by walking the text as we consume substrings, skipping
    over any whitespace (including that which is within the tokens).
    For this to work, the substring sequence must be identical to the
    text modulo whitespace.

    Spans are relative to the start of the string itself, but can be
    shifted by passing an offset. Empty tokens are accepted but have
    a zero-length span.

    Note: this function is lazy so you can use it incrementally
    provided you can generate the tokens lazily too
    """
    txt_iter = ((i, c) for i, c in enumerate(text) if not c.isspace())
    last = offset  # for corner case of empty tokens
    for token in tokens:
        tok_chars = [c for c in token if not c.isspace()]
        if not tok_chars:
            yield Span(last, last)
            continue
        prefix = list(islice(txt_iter, len(tok_chars)))
        if len(prefix) < len(tok_chars):
            msg = "Too many tokens (current: %s)" % token
            raise TokenizerException(msg)
        last = prefix[-1][0] + 1 + offset
        span = Span(prefix[0][0] + offset, last)
        pretty_prefix = text[span.char_start - offset:span.char_end - offset]
        # check the text prefix to make sure we have the same
        # non-whitespace characters
        for txt_pair, tok_char in zip(prefix, tok_chars):
            idx, txt_char = txt_pair
            if txt_char != tok_char:
                msg = "token mismatch at char %d (%s vs %s)\n"\
                    % (idx + offset, txt_char, tok_char)\
                    + " token: [%s]\n" % token\
                    + " text:  [%s]" % pretty_prefix
                raise TokenizerException(msg)
        yield span


def token_spans(text, sentences, spans=None):
    """
    Given the document text and sentences of words (as returned by
    `read_token_file`), recover the character span of every word.

    If `spans` (typically section spans) are given, only the text they
    cover is walked; the markup in between is skipped.

    Returns
    -------
    sentences : list of list of WordToken
    """
    if spans is None:
        walked = text
        offsets = list(range(len(text)))
    else:
        walked = ''.join(text[s.char_start:s.char_end] for s in spans)
        offsets = [i for s in spans
                   for i in range(s.char_start, s.char_end)]
    words = [w for sent in sentences for w in sent]
    raw_spans = list(generic_token_spans(walked, words))

    def absolute(span):
        "map a span over the walked text back onto the document"
        if span.length() == 0:
            pos = offsets[span.char_start] if span.char_start < len(offsets)\
                else len(text)
            return Span(pos, pos)
        return Span(offsets[span.char_start],
                    offsets[span.char_end - 1] + 1)

    res = []
    pos = 0
    for sent in sentences:
        res.append([WordToken(w, absolute(s)) for w, s in
                    zip(sent, raw_spans[pos:pos + len(sent)])])
        pos += len(sent)
    return res
