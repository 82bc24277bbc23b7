# License: BSD3

"""
Converting one ACE document: annotations and source text in, tokenized
document and annotation graph out
"""

from collections import namedtuple
import logging
import os

from acealign.assembly import assemble
from acealign.checks import check_entity_mentions
from acealign.document import UuidGenerator
from acealign.external import tokenizer
from acealign.placement import place_sentences
from .apf import read_apf_file
from .corpus import MissingTextFileError
from .sgml import read_sgm_file

_logger = logging.getLogger(__name__)


Conversion = namedtuple('Conversion', 'document graph mismatches')
"""
Result of converting a document

:param document: `acealign.document.Document` with placed sentences
:param graph: `acealign.assembly.AnnotationGraph`
:param mismatches: list of `acealign.checks.Mismatch`
"""


def gold_spans(apf_doc):
    """
    Half-open spans of all entity mention extents and heads
    """
    spans = []
    for mention in apf_doc.entity_mentions.values():
        spans.append(mention.extent.to_span())
        spans.append(mention.head.to_span())
    return spans


def convert(apf_doc, doc, sentences=None, ids=None):
    """
    Tokenize a document (unless `sentences` is given), place its
    sentences and build its annotation graph

    Parameters
    ----------
    apf_doc : acealign.ace.apf.AceDocument
    doc : acealign.document.Document
        Document with sections and no sentences yet (filled in place)
    sentences : list of list of WordToken, optional
        Pre-tokenized sentences; if None we use the nltk tokenizer
    ids : iterator of str, optional
        Identifier source (fresh uuids by default)

    Returns
    -------
    conversion : Conversion

    Raises
    ------
    acealign.placement.SentencePlacementError
    acealign.align.AlignmentError
    acealign.assembly.ReferenceResolutionError
    """
    ids = ids or UuidGenerator()
    mismatches = check_entity_mentions(apf_doc, doc.text)

    section_spans = [s.span for s in doc.sections]
    if sentences is None:
        _logger.info('Tokenizing and sentence splitting')
        sentences = tokenizer.tokenize(doc.text, section_spans)
    sentences = tokenizer.respect_mentions(sentences, gold_spans(apf_doc),
                                           limits=section_spans)

    _logger.info('Adding tokenization and sentence splits')
    place_sentences(doc, sentences, ids)

    _logger.info('Adding annotations')
    graph = assemble(apf_doc, doc, ids)
    return Conversion(doc, graph, mismatches)


def convert_files(apf_file, sgm_file, token_file=None, ids=None,
                  extras=True):
    """
    Read and convert an annotation file and its source document (see
    `convert`)

    :param token_file: pre-tokenized version of the document, see
                       `acealign.external.tokenizer.read_token_file`
    :param extras: see `acealign.ace.apf.read_apf`

    Raises
    ------
    MissingTextFileError
        If the source document is not there
    """
    if not os.path.exists(sgm_file):
        raise MissingTextFileError(apf_file, sgm_file)
    ids = ids or UuidGenerator()
    doc = read_sgm_file(sgm_file, ids=ids)
    apf_doc = read_apf_file(apf_file, extras=extras)
    sentences = None
    if token_file is not None:
        words = tokenizer.read_token_file(token_file)
        sentences = tokenizer.token_spans(doc.text, words,
                                          [s.span for s in doc.sections])
    return convert(apf_doc, doc, sentences=sentences, ids=ids)
