# -*- coding: utf-8 -*-
#
# License: BSD3

# pylint: disable=R0904

"""
Tests for acealign.external
"""

import codecs
import os
import shutil
import tempfile
import unittest

from acealign.annotation import Span
from .tokenizer import (TokenizerException, WordToken, generic_token_spans,
                        read_token_file, respect_mentions, token_spans,
                        tokenize)


def spans_of(sentences):
    "(start, end) pairs, sentence by sentence"
    return [[(t.start, t.end) for t in s] for s in sentences]


class TokenSpans(unittest.TestCase):
    """Recovering offsets for pre-tokenized text"""

    def test_simple_align(self):
        "trivial token realignment"

        tokens = ["a", "bb", "ccc"]
        text = "a bb    ccc"
        spans = list(generic_token_spans(text, tokens))
        expected = [Span(0, 1),
                    Span(2, 4),
                    Span(8, 11)]
        self.assertEqual(expected, spans)

    def test_messy_align(self):
        "ignore whitespace in token"

        tokens = ["a", "b b", "c c c"]
        text = "a bb    ccc"
        spans = list(generic_token_spans(text, tokens))
        expected = [Span(0, 1),
                    Span(2, 4),
                    Span(8, 11)]
        self.assertEqual(expected, spans)

    def test_mismatch(self):
        "tokens must match the text"
        self.assertRaises(TokenizerException, list,
                          generic_token_spans("a bb", ["a", "bc"]))
        self.assertRaises(TokenizerException, list,
                          generic_token_spans("a bb", ["a", "bb", "c"]))

    def test_sentences(self):
        "sentences keep their shape"
        text = "John  met\nMary ."
        sentences = token_spans(text, [["John", "met"], ["Mary", "."]])
        self.assertEqual([[(0, 4), (6, 9)], [(10, 14), (15, 16)]],
                         spans_of(sentences))
        self.assertEqual("met", sentences[0][1].word)

    def test_skip_markup(self):
        "only the given spans of the text are walked"
        text = "<x>ab</x> <y>cd e</y>"
        sentences = token_spans(text, [["ab"], ["cd", "e"]],
                                [Span(3, 5), Span(13, 17)])
        self.assertEqual([[(3, 5)], [(13, 15), (16, 17)]],
                         spans_of(sentences))


class TokenFile(unittest.TestCase):
    """Reading pre-tokenized files"""

    def setUp(self):
        self.tmpdir = tempfile.mkdtemp()

    def tearDown(self):
        shutil.rmtree(self.tmpdir)

    def test_read(self):
        "one token per line, blank line between sentences"
        fname = os.path.join(self.tmpdir, 'doc.tok')
        with codecs.open(fname, 'w', 'utf-8') as stream:
            stream.write("John\tNNP\nmet VBD\n\n\nMary\n.\n")
        self.assertEqual([["John", "met"], ["Mary", "."]],
                         read_token_file(fname))


class Tokenize(unittest.TestCase):
    """nltk tokenizer"""

    def test_words(self):
        "word tokens and their spans"
        text = "John met Mary."
        sentences = tokenize(text, [Span(0, len(text))])
        self.assertEqual([[(0, 4), (5, 8), (9, 13), (13, 14)]],
                         spans_of(sentences))
        self.assertEqual(["John", "met", "Mary", "."],
                         [t.word for t in sentences[0]])

    def test_sections(self):
        "sentences never cross the given spans"
        text = "<h>A headline without a stop</h>\n<p>The body. More.</p>"
        spans = [Span(3, 28), Span(36, 51)]
        sentences = tokenize(text, spans)
        self.assertTrue(len(sentences) >= 2)
        for sent in sentences:
            self.assertTrue(any(s.encloses(Span(sent[0].start, sent[-1].end))
                                for s in spans))
            for tok in sent:
                self.assertEqual(tok.word, text[tok.start:tok.end])

    def test_skip_blank(self):
        "blank spans yield no sentences"
        self.assertEqual([], tokenize("   ", [Span(0, 3)]))


class RespectMentions(unittest.TestCase):
    """Adjusting tokens to gold annotations"""

    def test_split(self):
        "tokens are split on span boundaries"
        text = "abcdef"
        sentences = [[WordToken(text, Span(0, 6))]]
        res = respect_mentions(sentences, [Span(2, 4)])
        self.assertEqual([[(0, 2), (2, 4), (4, 6)]], spans_of(res))
        self.assertEqual(["ab", "cd", "ef"], [t.word for t in res[0]])

    def test_merge(self):
        "sentences are merged when a span straddles them"
        text = "Ann Dr. Bob sat."
        sentences = [[WordToken("Ann", Span(0, 3)),
                      WordToken("Dr.", Span(4, 7))],
                     [WordToken("Bob", Span(8, 11)),
                      WordToken("sat", Span(12, 15)),
                      WordToken(".", Span(15, 16))]]
        self.assertEqual("Dr. Bob", text[4:11])
        res = respect_mentions(sentences, [Span(4, 11)])
        self.assertEqual(1, len(res))
        self.assertEqual(5, len(res[0]))

    def test_no_merge_across_limits(self):
        "sentences in different limits stay apart"
        sentences = [[WordToken("Ann", Span(0, 3))],
                     [WordToken("Bob", Span(8, 11))]]
        res = respect_mentions(sentences, [Span(0, 11)],
                               limits=[Span(0, 3), Span(8, 11)])
        self.assertEqual(2, len(res))

    def test_untouched(self):
        "nothing to do"
        sentences = [[WordToken("Ann", Span(0, 3))],
                     [WordToken("Bob", Span(8, 11))]]
        res = respect_mentions(sentences, [Span(0, 3), Span(8, 11)])
        self.assertEqual(spans_of(sentences), spans_of(res))


if __name__ == '__main__':
    unittest.main()
