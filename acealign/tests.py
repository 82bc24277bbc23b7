# -*- coding: utf-8 -*-
#
# License: BSD3
# pylint: disable=too-many-public-methods, invalid-name

"""
Tests for acealign
"""

import unittest
import xml.etree.ElementTree as ET

from acealign.annotation import CharSeq, Span
from acealign.align import (AlignmentError, TokenRefSequence, align,
                            CROSSES_SENTENCES, END_BEFORE_START, UNMATCHED)
from acealign.ace.apf import (AceDocument, AceEntity, AceEntityMention,
                              AceEvent, AceEventMention,
                              AceEventMentionArgument)
from acealign.assembly import (ConversionCounts, ReferenceResolutionError,
                               all_events, assemble)
from acealign.checks import check_entity_mentions
from acealign.document import CounterGenerator, Document, Section
from acealign.external.tokenizer import WordToken
from acealign.output import graph_to_xml
from acealign.placement import SentencePlacementError, place_sentences

# ---------------------------------------------------------------------
# helpers
# ---------------------------------------------------------------------


def mk_sentence(text, spans):
    "word tokens for the given (start, end) pairs"
    return [WordToken(text[s:e], Span(s, e)) for s, e in spans]


def mk_doc(text, section_spans):
    "document with one section per (start, end) pair"
    sections = [Section('s%d' % i, Span(s, e))
                for i, (s, e) in enumerate(section_spans)]
    return Document('test', text, sections)


def charseq(text, start, end):
    "inclusive sequence with its text taken from the document"
    return CharSeq(text[start:end + 1], start, end)


# John met Mary.
# 0    5   9   13
JOHN_TXT = "John met Mary."
JOHN_TOKS = [(0, 4), (5, 8), (9, 13), (13, 14)]

# two sentences, two sections
# Ann ran. Bob sat.
# 0   4  7 9   13 16
ANN_TXT = "Ann ran. Bob sat."
ANN_TOKS = [[(0, 3), (4, 7), (7, 8)],
            [(9, 12), (13, 16), (16, 17)]]


def john_doc():
    "John met Mary, placed"
    doc = mk_doc(JOHN_TXT, [(0, 14)])
    place_sentences(doc, [mk_sentence(JOHN_TXT, JOHN_TOKS)],
                    CounterGenerator('t'))
    return doc


def ann_doc():
    "Ann ran. Bob sat., placed"
    doc = mk_doc(ANN_TXT, [(0, 8), (9, 17)])
    place_sentences(doc, [mk_sentence(ANN_TXT, s) for s in ANN_TOKS],
                    CounterGenerator('t'))
    return doc


def entity(eid, etype, subtype, mentions):
    "entity with mentions given as (id, phrase type, extent, head)"
    ent = AceEntity(eid, etype, subtype, 'SPC')
    for mid, ptype, extent, head in mentions:
        ent.mentions.append(AceEntityMention(mid, ptype, ptype, extent,
                                             head, eid))
    return ent


def event(eid, etype, subtype, mentions):
    "event with mentions given as (id, extent, anchor, [(role, refid)])"
    evt = AceEvent(eid, etype, subtype, modality='Asserted', tense='Past')
    for mid, extent, anchor, args in mentions:
        mention = AceEventMention(mid, extent, anchor, eid)
        mention.args.extend(AceEventMentionArgument(r, i) for r, i in args)
        evt.mentions.append(mention)
    return evt


def john_apf():
    "annotations for John met Mary"
    john = charseq(JOHN_TXT, 0, 3)
    mary = charseq(JOHN_TXT, 9, 12)
    apf = AceDocument('test')
    apf.add_entity(entity('E1', 'PER', 'Individual',
                          [('E1-1', 'NAM', john, john)]))
    apf.add_entity(entity('E2', 'PER', 'Individual',
                          [('E2-1', 'NAM', mary, mary)]))
    apf.add_event(event('EV1', 'Contact', 'Meet',
                        [('EV1-1', charseq(JOHN_TXT, 0, 13),
                          charseq(JOHN_TXT, 5, 7),
                          [('Entity', 'E1-1'), ('Entity', 'E2-1')])]))
    return apf

# ---------------------------------------------------------------------
# spans
# ---------------------------------------------------------------------


class SpanTest(unittest.TestCase):
    "tests for acealign.annotation"

    def test_encloses(self):
        "Span.encloses() function"
        self.assertTrue(Span(0, 5).encloses(Span(0, 5)))
        self.assertTrue(Span(0, 5).encloses(Span(1, 3)))
        self.assertFalse(Span(0, 5).encloses(Span(4, 6)))
        self.assertFalse(Span(0, 5).encloses(None))

    def test_merge_all(self):
        "Span.merge_all() function"
        self.assertEqual(Span(1, 9),
                         Span.merge_all([Span(3, 9), Span(1, 2)]))
        self.assertRaises(ValueError, Span.merge_all, [])

    def test_single_char(self):
        "single character annotation"
        cseq = CharSeq("a", 4, 4)
        self.assertEqual(Span(4, 5), cseq.to_span())
        self.assertEqual(1, cseq.to_span().length())

    def test_token_boundary(self):
        "annotation ending on the last character of a token"
        cseq = charseq(JOHN_TXT, 9, 12)
        span = cseq.to_span()
        self.assertEqual(Span(9, 13), span)
        self.assertEqual("Mary", JOHN_TXT[span.char_start:span.char_end])
        self.assertFalse(span.contains_offset(13))

    def test_empty(self):
        "empty annotation"
        cseq = CharSeq("", 4, 3)
        self.assertEqual(Span(4, 4), cseq.to_span())
        self.assertEqual(0, cseq.to_span().length())
        self.assertRaises(ValueError, CharSeq, "", 4, 2)

    def test_round_trip(self):
        "from_span undoes to_span"
        for cseq in [CharSeq("a", 0, 0), CharSeq("", 7, 6),
                     CharSeq("Mary", 9, 12)]:
            self.assertEqual(cseq, CharSeq.from_span(cseq.to_span(),
                                                     cseq.text))


# ---------------------------------------------------------------------
# placement
# ---------------------------------------------------------------------


class PlacementTest(unittest.TestCase):
    "tests for acealign.placement"

    def test_place(self):
        "every sentence lands in its own section"
        doc = ann_doc()
        self.assertEqual([1, 1], [len(s.sentences) for s in doc.sections])
        self.assertEqual(2, len(list(doc.tokenizations())))
        sent = doc.sections[1].sentences[0]
        self.assertEqual(Span(9, 17), sent.span)
        self.assertEqual([0, 1, 2], [t.index for t in sent.tokenization])
        self.assertEqual(["Bob", "sat", "."],
                         [t.text for t in sent.tokenization])

    def test_count(self):
        "number of placed sentences"
        doc = mk_doc(ANN_TXT, [(0, 17)])
        sentences = [mk_sentence(ANN_TXT, s) for s in ANN_TOKS]
        self.assertEqual(2, place_sentences(doc, sentences,
                                            CounterGenerator()))
        self.assertEqual(2, len(doc.sections[0].sentences))

    def test_first_section_only(self):
        "overlapping sections: the first one wins"
        doc = mk_doc(ANN_TXT, [(0, 17), (0, 8)])
        sentences = [mk_sentence(ANN_TXT, s) for s in ANN_TOKS]
        place_sentences(doc, sentences, CounterGenerator())
        self.assertEqual(2, len(doc.sections[0].sentences))
        self.assertEqual(0, len(doc.sections[1].sentences))

    def test_fresh_ids(self):
        "each tokenization gets its own identifier"
        doc = ann_doc()
        tids = [t.tid for t in doc.tokenizations()]
        self.assertEqual(len(tids), len(set(tids)))

    def test_unplaced(self):
        "sentence straddling two sections"
        doc = mk_doc(ANN_TXT, [(0, 8), (9, 17)])
        sentences = [mk_sentence(ANN_TXT, s) for s in ANN_TOKS]
        sentences.append(mk_sentence(ANN_TXT, [(4, 7), (9, 12)]))
        with self.assertRaises(SentencePlacementError) as cm:
            place_sentences(doc, sentences, CounterGenerator())
        self.assertEqual([2], cm.exception.unplaced)

    def test_empty_sentence(self):
        "empty sentences cannot be placed"
        doc = mk_doc(ANN_TXT, [(0, 17)])
        with self.assertRaises(SentencePlacementError) as cm:
            place_sentences(doc, [[]], CounterGenerator())
        self.assertEqual([0], cm.exception.unplaced)

# ---------------------------------------------------------------------
# alignment
# ---------------------------------------------------------------------


class AlignTest(unittest.TestCase):
    "tests for acealign.align"

    def assertAligned(self, doc, start, end, expected):
        "align [start, end] and check the token range"
        tokens = align(doc, charseq(doc.text, start, end))
        self.assertEqual(expected, (tokens.start, tokens.end))
        return tokens

    def assertAlignError(self, reason, doc, start, end):
        "align [start, end] and check that it fails for this reason"
        with self.assertRaises(AlignmentError) as cm:
            align(doc, charseq(doc.text, start, end))
        self.assertEqual(reason, cm.exception.reason)

    def test_john_mary(self):
        "John met Mary"
        doc = john_doc()
        tid = doc.sections[0].sentences[0].tokenization.tid
        tokens = self.assertAligned(doc, 0, 3, (0, 1))
        self.assertEqual(tid, tokens.tokenization_id)
        self.assertAligned(doc, 9, 12, (2, 3))
        self.assertAligned(doc, 0, 13, (0, 4))

    def test_partial_tokens(self):
        "spans inside tokens cover the whole tokens"
        doc = john_doc()
        self.assertAligned(doc, 1, 2, (0, 1))
        self.assertAligned(doc, 2, 10, (0, 3))

    def test_second_sentence(self):
        "token indices are relative to the sentence"
        doc = ann_doc()
        tokens = self.assertAligned(doc, 13, 15, (1, 2))
        second = doc.sections[1].sentences[0].tokenization.tid
        self.assertEqual(second, tokens.tokenization_id)

    def test_soundness(self):
        "aligned tokens cover the span"
        doc = ann_doc()
        for start in range(len(ANN_TXT)):
            for end in range(start, len(ANN_TXT)):
                try:
                    tokens = align(doc, charseq(ANN_TXT, start, end))
                except AlignmentError:
                    continue
                tkn = doc.tokenization(tokens.tokenization_id)
                self.assertLess(tokens.start, tokens.end)
                first = tkn.tokens[tokens.start]
                last = tkn.tokens[tokens.end - 1]
                self.assertLessEqual(first.span.char_start, start)
                self.assertGreater(last.span.char_end, end)

    def test_crossing(self):
        "start in one sentence, end in the next"
        doc = ann_doc()
        # from the final period of the first sentence into "Bob"
        self.assertAlignError(CROSSES_SENTENCES, doc, 7, 11)
        self.assertAlignError(CROSSES_SENTENCES, doc, 4, 13)

    def test_unmatched(self):
        "span outside of any token"
        doc = ann_doc()
        self.assertAlignError(UNMATCHED, doc, 8, 8)
        # start in a token, end in whitespace
        self.assertAlignError(UNMATCHED, doc, 0, 3)

    def test_end_before_start(self):
        "span starting in whitespace"
        doc = ann_doc()
        self.assertAlignError(END_BEFORE_START, doc, 8, 11)

    def test_mismatch_logged(self):
        "text differing from the tokens is logged at debug level"
        doc = john_doc()
        with self.assertLogs('acealign.align', level='DEBUG') as cm:
            align(doc, CharSeq("Jon", 0, 3), log_mismatch=True)
        self.assertIn('Mismatch', cm.output[0])

    def test_token_ref(self):
        "TokenRefSequence helpers"
        tokens = TokenRefSequence('t', 2, 5)
        self.assertEqual([2, 3, 4], tokens.indices())
        self.assertEqual(4, tokens.last())
        self.assertEqual(3, tokens.with_anchor(3).anchor)
        self.assertIsNone(tokens.anchor)

# ---------------------------------------------------------------------
# assembly
# ---------------------------------------------------------------------


class AssemblyTest(unittest.TestCase):
    "tests for acealign.assembly"

    def test_john_mary(self):
        "entity mentions and event arguments"
        doc = john_doc()
        graph = assemble(john_apf(), doc, CounterGenerator('g'))
        self.assertEqual(["PER:Individual", "PER:Individual"],
                         [e.type for e in graph.entities])
        john, mary = graph.entity_mentions
        self.assertEqual((0, 1, 0),
                         (john.tokens.start, john.tokens.end,
                          john.tokens.anchor))
        self.assertEqual((2, 3, 2),
                         (mary.tokens.start, mary.tokens.end,
                          mary.tokens.anchor))
        self.assertEqual("NAM", mary.phrase_type)
        self.assertEqual([mary.uid], graph.entities[1].mention_ids)

        situation, = graph.situations
        self.assertEqual("Contact:Meet", situation.kind)
        self.assertEqual("EVENT", situation.situation_type)
        self.assertEqual({'modality': 'Asserted', 'tense': 'Past'},
                         dict(situation.features))
        mention, = graph.situation_mentions
        self.assertEqual((0, 4), (mention.tokens.start, mention.tokens.end))
        self.assertEqual([("Entity", john.uid), ("Entity", mary.uid)],
                         [(a.role, a.entity_mention_id)
                          for a in mention.arguments])

    def test_referential_integrity(self):
        "every argument points to an entity mention of the graph"
        graph = assemble(john_apf(), john_doc(), CounterGenerator('g'))
        e_uids = set(m.uid for m in graph.entity_mentions)
        for mention in graph.situation_mentions:
            for arg in mention.arguments:
                self.assertIn(arg.entity_mention_id, e_uids)
                graph.entity_mention(arg.entity_mention_id)

    def test_anchor(self):
        "anchor is the last token of the head, not of the extent"
        doc = john_doc()
        apf = AceDocument('test')
        apf.add_entity(entity('E1', 'PER', 'Group',
                              [('E1-1', 'NOM', charseq(JOHN_TXT, 0, 12),
                                charseq(JOHN_TXT, 5, 7))]))
        graph = assemble(apf, doc, CounterGenerator('g'))
        tokens = graph.entity_mentions[0].tokens
        self.assertEqual((0, 3, 1), (tokens.start, tokens.end, tokens.anchor))

    def test_counts(self):
        "running totals"
        graph = assemble(john_apf(), john_doc(), CounterGenerator('g'))
        expected = ConversionCounts(entities=2, entity_mentions=2,
                                    events=1, event_mentions=1,
                                    event_mention_roles=2)
        self.assertEqual(expected, graph.counts)
        self.assertEqual(4, (graph.counts + graph.counts).entities)

    def test_entity_crossing_fatal(self):
        "entity mentions must align"
        doc = ann_doc()
        apf = AceDocument('test')
        apf.add_entity(entity('E1', 'PER', 'Individual',
                              [('E1-1', 'NAM', charseq(ANN_TXT, 7, 11),
                                charseq(ANN_TXT, 9, 11))]))
        with self.assertRaises(AlignmentError) as cm:
            assemble(apf, doc, CounterGenerator('g'))
        self.assertEqual(CROSSES_SENTENCES, cm.exception.reason)

    def test_event_crossing_recoverable(self):
        "event mention extents may fail to align"
        doc = ann_doc()
        bob = charseq(ANN_TXT, 9, 11)
        apf = AceDocument('test')
        apf.add_entity(entity('E1', 'PER', 'Individual',
                              [('E1-1', 'NAM', bob, bob)]))
        apf.add_event(event('EV1', 'Movement', 'Transport',
                            [('EV1-1', charseq(ANN_TXT, 7, 11),
                              charseq(ANN_TXT, 4, 6),
                              [('Artifact', 'E1-1')])]))
        with self.assertLogs('acealign.assembly', level='WARNING'):
            graph = assemble(apf, doc, CounterGenerator('g'))
        mention, = graph.situation_mentions
        self.assertIsNone(mention.tokens)
        self.assertEqual([("Artifact", graph.entity_mentions[0].uid)],
                         [(a.role, a.entity_mention_id)
                          for a in mention.arguments])

    def test_unresolved_argument(self):
        "argument pointing nowhere"
        apf = john_apf()
        apf.events[0].mentions[0].args.append(
            AceEventMentionArgument('Place', 'E9-1'))
        with self.assertRaises(ReferenceResolutionError) as cm:
            assemble(apf, john_doc(), CounterGenerator('g'))
        self.assertEqual('E9-1', cm.exception.target_id)

    def test_all_events(self):
        "events reached through their mentions, once, first seen first"
        apf = AceDocument('test')
        ev1 = event('EV1', 'Life', 'Die', [])
        ev2 = event('EV2', 'Life', 'Marry', [])
        ev3 = event('EV3', 'Life', 'Born', [])
        apf.events.extend([ev1, ev2, ev3])
        for mid, evt in [('EV2-1', ev2), ('EV1-1', ev1), ('EV2-2', ev2)]:
            apf.event_mentions[mid] = AceEventMention(mid, None, None,
                                                      evt.id)
        self.assertEqual(['EV2', 'EV1'], [e.id for e in all_events(apf)])

    def test_idempotent(self):
        "same input, same graph"
        def run():
            "convert with fresh state"
            doc = john_doc()
            graph = assemble(john_apf(), doc, CounterGenerator('g'))
            return ET.tostring(graph_to_xml(doc, graph))
        self.assertEqual(run(), run())

# ---------------------------------------------------------------------
# checks
# ---------------------------------------------------------------------


class CheckTest(unittest.TestCase):
    "tests for acealign.checks"

    def test_ampersand(self):
        "&amp; in the text is not a mismatch"
        text = "AT&amp;T sued."
        att = CharSeq("AT&T", 0, 7)
        apf = AceDocument('test')
        apf.add_entity(entity('E1', 'ORG', 'Commercial',
                              [('E1-1', 'NAM', att, att)]))
        self.assertEqual([], check_entity_mentions(apf, text))

    def test_mismatch(self):
        "mismatches are logged and returned in order"
        text = JOHN_TXT
        apf = AceDocument('test')
        apf.add_entity(entity('E2', 'PER', 'Individual',
                              [('E2-1', 'NAM', CharSeq("Mari", 9, 12),
                                CharSeq("Mari", 9, 12))]))
        apf.add_entity(entity('E1', 'PER', 'Individual',
                              [('E1-1', 'NAM', CharSeq("Jon", 0, 3),
                                CharSeq("Jon", 0, 3)),
                               ('E1-2', 'NAM', charseq(text, 5, 7),
                                charseq(text, 5, 7))]))
        with self.assertLogs('acealign.checks', level='WARNING') as cm:
            mismatches = check_entity_mentions(apf, text)
        self.assertEqual(2, len(cm.output))
        self.assertEqual(['E1-1', 'E2-1'],
                         [m.mention_id for m in mismatches])
        self.assertEqual("John", mismatches[0].doc_text)


if __name__ == '__main__':
    unittest.main()
