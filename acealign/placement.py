# License: BSD3

"""
Placing externally produced sentences into document sections
"""

import logging

from .annotation import Span
from .document import Sentence, Token, Tokenization
from .external.tokenizer import sentence_span
from .internalutil import AceAlignException, TRACE

_logger = logging.getLogger(__name__)


class SentencePlacementError(AceAlignException):
    """
    Some sentences could not be placed in any section. This means the
    tokenizer and the sections disagree about the document, and no
    alignment made on top of it can be trusted.
    """
    def __init__(self, unplaced):
        self.unplaced = sorted(unplaced)
        "indices of the unplaced sentences"

        msg = "Sentence(s) not contained in any section: %s" %\
            ', '.join(str(i) for i in self.unplaced)
        super(SentencePlacementError, self).__init__(msg)


def section_contains(section, sentence):
    """
    True if the section span contains the sentence, from the start of
    its first token to the end of its last

    :type sentence: [acealign.external.tokenizer.WordToken]
    """
    return section.span.encloses(sentence_span(sentence))


def _mk_sentence(sentence, ids):
    """
    Fresh Sentence (and Tokenization) for a list of word tokens
    """
    tokens = [Token(i, tok.word, Span(tok.start, tok.end))
              for i, tok in enumerate(sentence)]
    tokenization = Tokenization(next(ids), tokens)
    return Sentence(next(ids), sentence_span(sentence), tokenization)


def place_sentences(doc, sentences, ids):
    """
    Put every sentence in the first section (in document order) that
    contains it, giving each one a fresh tokenization.

    Parameters
    ----------
    doc : acealign.document.Document
        Document whose sections are filled in (in place)
    sentences : list of list of WordToken
        Ordered sentences from the tokenizer
    ids : iterator of str
        Identifier source (see `acealign.document.UuidGenerator`)

    Returns
    -------
    count : int
        Number of placed sentences (always `len(sentences)`)

    Raises
    ------
    SentencePlacementError
        If any sentence is left over after trying every section
    """
    taken = set()
    for snum, section in enumerate(doc.sections):
        for i, sentence in enumerate(sentences):
            if i in taken or not section_contains(section, sentence):
                continue
            _logger.log(TRACE, 'Section s=%d taking sentence i=%d',
                        snum, i)
            taken.add(i)
            section.sentences.append(_mk_sentence(sentence, ids))

    if len(taken) != len(sentences):
        unplaced = frozenset(range(len(sentences))) - taken
        raise SentencePlacementError(unplaced)
    return len(taken)
