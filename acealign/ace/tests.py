# -*- coding: utf-8 -*-
#
# License: BSD3
# pylint: disable=too-many-public-methods, invalid-name

"""
Tests for acealign.ace
"""

import codecs
import os
import re
import shutil
import tempfile
import unittest
import xml.etree.ElementTree as ET

from acealign.align import CROSSES_SENTENCES
from acealign.assembly import ConversionCounts
from acealign.document import CounterGenerator
from acealign.internalutil import AceXmlException
from acealign.output import graph_to_xml, read_graph_counts
from .apf import TRIGGER, read_apf
from .convert import convert, convert_files
from .corpus import FileId, MissingTextFileError, Reader, sgm_path
from .sgml import read_sgm
from .util.main import main


SGM = """<DOC>
<DOCID> TEST-1 </DOCID>
<BODY>
<HEADLINE>
Ann &amp; Bob visit Paris
</HEADLINE>
<TEXT>
<P>
John met Mary in Paris. They talked.
</P>
</TEXT>
</BODY>
</DOC>
"""

TEXT = re.sub(r'<[^>]*>', '', SGM)

TOKENS = """TEST-1

Ann
&amp;
Bob
visit
Paris

John
met
Mary
in
Paris
.

They
talked
.
"""


def add_charseq(parent, tag, start, end, text=None):
    """
    `<tag><charseq/></tag>` for the half-open span [start, end) of
    the text (annotated with `text` if given)
    """
    wrapper = ET.SubElement(parent, tag)
    cseq = ET.SubElement(wrapper, 'charseq', START=str(start),
                         END=str(end - 1))
    cseq.text = TEXT[start:end] if text is None else text
    return wrapper


def span_of(needle, last=False):
    "span of the first (or last) occurrence of a string in the text"
    start = TEXT.rindex(needle) if last else TEXT.index(needle)
    return start, start + len(needle)


def add_entity_mention(entity, mid, ptype, span, text=None):
    "entity mention whose head is its extent"
    mention = ET.SubElement(entity, 'entity_mention', ID=mid, TYPE=ptype,
                            LDCTYPE=ptype)
    add_charseq(mention, 'extent', span[0], span[1], text)
    add_charseq(mention, 'head', span[0], span[1], text)


def add_event_mention(event, mid, scope, anchor, args):
    "event mention with (role, refid) arguments"
    mention = ET.SubElement(event, 'event_mention', ID=mid)
    add_charseq(mention, 'extent', *scope)
    add_charseq(mention, 'ldc_scope', *scope)
    add_charseq(mention, 'anchor', *anchor)
    for role, refid in args:
        ET.SubElement(mention, 'event_mention_argument', ROLE=role,
                      REFID=refid)


def mk_apf():
    "annotations for the SGM document"
    root = ET.Element('source_file', URI='TEST-1.sgm')
    doc = ET.SubElement(root, 'document', DOCID='TEST-1')

    ent = ET.SubElement(doc, 'entity', ID='E1', TYPE='PER',
                        SUBTYPE='Individual', CLASS='SPC')
    add_entity_mention(ent, 'E1-1', 'NAM', span_of("John"))
    add_entity_mention(ent, 'E1-2', 'PRO', span_of("They"))

    ent = ET.SubElement(doc, 'entity', ID='E2', TYPE='PER',
                        SUBTYPE='Individual', CLASS='SPC')
    add_entity_mention(ent, 'E2-1', 'NAM', span_of("Mary"))

    ent = ET.SubElement(doc, 'entity', ID='E3', TYPE='GPE',
                        SUBTYPE='Population-Center', CLASS='SPC')
    add_entity_mention(ent, 'E3-1', 'NAM', span_of("Paris", last=True))
    add_entity_mention(ent, 'E3-2', 'NAM', span_of("Paris"))

    ent = ET.SubElement(doc, 'entity', ID='E4', TYPE='PER',
                        SUBTYPE='Group', CLASS='SPC')
    add_entity_mention(ent, 'E4-1', 'NAM', span_of("Ann &amp; Bob"),
                       text="Ann & Bob")

    evt = ET.SubElement(doc, 'event', ID='EV1', TYPE='Contact',
                        SUBTYPE='Meet', MODALITY='Asserted',
                        POLARITY='Positive', GENERICITY='Specific',
                        TENSE='Past')
    add_event_mention(evt, 'EV1-1', span_of("John met Mary in Paris."),
                      span_of("met"),
                      [('Entity', 'E1-1'), ('Entity', 'E2-1'),
                       ('Place', 'E3-1'), ('Time-Within', 'T9-1')])

    evt = ET.SubElement(doc, 'event', ID='EV2', TYPE='Contact',
                        SUBTYPE='Phone-Write')
    # from the headline into the body
    scope = (span_of("Paris")[0], span_of("John")[1])
    add_event_mention(evt, 'EV2-1', scope, span_of("talked"),
                      [('Entity', 'E1-2')])
    return root


EXPECTED_COUNTS = ConversionCounts(entities=6, entity_mentions=8,
                                   events=2, event_mentions=2,
                                   event_mention_roles=6)


class SgmTest(unittest.TestCase):
    "reading source documents"

    def test_text(self):
        "markup is gone, entities are not"
        doc = read_sgm(SGM)
        self.assertEqual(TEXT, doc.text)
        self.assertIn("Ann &amp; Bob", doc.text)
        self.assertEqual("TEST-1", doc.doc_id)

    def test_sections(self):
        "one section per run of text"
        doc = read_sgm(SGM)
        self.assertEqual(['DOCID', 'HEADLINE', 'P'],
                         [s.kind for s in doc.sections])
        self.assertEqual(["TEST-1", "Ann &amp; Bob visit Paris",
                          "John met Mary in Paris. They talked."],
                         [doc.substring(s.span) for s in doc.sections])

    def test_no_docid(self):
        "document id is not required"
        doc = read_sgm("<DOC><TEXT>Hello.</TEXT></DOC>")
        self.assertIsNone(doc.doc_id)
        self.assertEqual("Hello.", doc.text)


class ApfTest(unittest.TestCase):
    "reading annotations"

    def test_entities(self):
        "entities and mentions, triggers included"
        apf = read_apf(mk_apf())
        self.assertEqual('TEST-1', apf.doc_id)
        self.assertEqual(['E1', 'E2', 'E3', 'E4',
                          'EV1-1-TRIGGER', 'EV2-1-TRIGGER'],
                         [e.id for e in apf.entities])
        mention = apf.entity_mentions['E4-1']
        self.assertEqual("Ann & Bob", mention.extent.text)
        self.assertEqual(span_of("Ann &amp; Bob"),
                         (mention.extent.char_start,
                          mention.extent.char_end + 1))
        trigger = apf.entity_mentions['EV1-1-TRIGGER-0']
        self.assertEqual("met", trigger.head.text)
        self.assertEqual(TRIGGER, trigger.type)

    def test_events(self):
        "event attributes and arguments"
        apf = read_apf(mk_apf())
        ev1 = apf.event('EV1')
        self.assertEqual(('Contact', 'Meet'), (ev1.type, ev1.subtype))
        self.assertEqual('Past', ev1.features()['tense'])
        mention = apf.event_mentions['EV1-1']
        self.assertEqual('EV1', mention.event_id)
        self.assertEqual("met", mention.anchor.text)
        # Time-Within points to nothing we know: dropped
        self.assertEqual([(TRIGGER, 'EV1-1-TRIGGER-0'),
                          ('Entity', 'E1-1'), ('Entity', 'E2-1'),
                          ('Place', 'E3-1')],
                         [tuple(a) for a in mention.args])
        self.assertEqual({}, dict(apf.event('EV2').features()))

    def test_no_extras(self):
        "only proper entities"
        apf = read_apf(mk_apf(), extras=False)
        self.assertEqual(4, len(apf.entities))
        self.assertEqual([('Entity', 'E1-2')],
                         [tuple(a) for a in apf.event_mentions['EV2-1'].args])

    def test_timex_values(self):
        "time expressions and values as entities"
        root = ET.fromstring(
            '<source_file><document DOCID="D">'
            '<timex2 ID="D-T1" VAL="2003"><timex2_mention ID="D-T1-1">'
            '<extent><charseq START="0" END="3">2003</charseq></extent>'
            '</timex2_mention></timex2>'
            '<value ID="D-V1" TYPE="Numeric" SUBTYPE="Money">'
            '<value_mention ID="D-V1-1"><extent>'
            '<charseq START="5" END="7">$10</charseq></extent>'
            '</value_mention></value>'
            '<value ID="D-V2" TYPE="Job-Title"><value_mention ID="D-V2-1">'
            '<extent><charseq START="9" END="14">lawyer</charseq></extent>'
            '</value_mention></value>'
            '</document></source_file>')
        apf = read_apf(root)
        self.assertEqual([('TIM', 'time'), ('NUM', 'Money'), ('JOB', 'JOB')],
                         [(e.type, e.subtype) for e in apf.entities])
        mention = apf.entity_mentions['D-V1-1']
        self.assertEqual(mention.extent, mention.head)
        self.assertEqual([], read_apf(root, extras=False).entities)

    def test_missing_charseq(self):
        "broken annotations"
        root = ET.fromstring(
            '<document DOCID="D"><entity ID="E1" TYPE="PER">'
            '<entity_mention ID="E1-1" TYPE="NAM"><extent/><head/>'
            '</entity_mention></entity></document>')
        self.assertRaises(AceXmlException, read_apf, root)

    def test_bad_offsets(self):
        "offsets that are not numbers or go backwards"
        for start, end in [('9', '2'), ('nine', '12')]:
            root = mk_apf()
            cseq = root.find('.//charseq')
            cseq.set('START', start)
            cseq.set('END', end)
            self.assertRaises(AceXmlException, read_apf, root)



class ConvertTest(unittest.TestCase):
    "whole document conversion"

    def setUp(self):
        self.tmpdir = tempfile.mkdtemp()
        self.apf_file = os.path.join(self.tmpdir, 'TEST-1.apf.xml')
        self.sgm_file = os.path.join(self.tmpdir, 'TEST-1.sgm')
        ET.ElementTree(mk_apf()).write(self.apf_file, encoding='utf-8')
        with codecs.open(self.sgm_file, 'w', 'utf-8') as stream:
            stream.write(SGM)

    def tearDown(self):
        shutil.rmtree(self.tmpdir)

    def test_convert(self):
        "counts, anchors and skipped extents"
        conversion = convert(read_apf(mk_apf()), read_sgm(SGM),
                             ids=CounterGenerator('x'))
        graph = conversion.graph
        self.assertEqual([], conversion.mismatches)
        self.assertEqual(EXPECTED_COUNTS, graph.counts)

        annbob = graph.entity_mentions[[m.mention_id for m in
                                        graph.entity_mentions].index('E4-1')]
        self.assertEqual((0, 5, 4), (annbob.tokens.start, annbob.tokens.end,
                                     annbob.tokens.anchor))
        self.assertEqual("Group", annbob.entity_type.split(':')[1])

        ev1, ev2 = graph.situation_mentions
        self.assertIsNotNone(ev1.tokens)
        self.assertIsNone(ev2.tokens)
        self.assertEqual([TRIGGER, 'Entity'], [a.role for a in ev2.arguments])

    def test_crossing_logged(self):
        "skipped event extents are logged"
        with self.assertLogs('acealign.assembly', level='WARNING') as cm:
            convert(read_apf(mk_apf()), read_sgm(SGM),
                    ids=CounterGenerator('x'))
        self.assertIn(CROSSES_SENTENCES, cm.output[0])
        self.assertIn('EV2-1', cm.output[0])

    def test_sections_hold_sentences(self):
        "sentences are placed in their sections"
        conversion = convert(read_apf(mk_apf()), read_sgm(SGM),
                             ids=CounterGenerator('x'))
        doc = conversion.document
        for section in doc.sections:
            self.assertTrue(section.sentences)
            for sentence in section.sentences:
                self.assertTrue(section.span.encloses(sentence.span))

    def test_files(self):
        "converting from files, with or without a token file"
        conversion = convert_files(self.apf_file, self.sgm_file)
        self.assertEqual(EXPECTED_COUNTS, conversion.graph.counts)

        tok_file = os.path.join(self.tmpdir, 'TEST-1.tok')
        with codecs.open(tok_file, 'w', 'utf-8') as stream:
            stream.write(TOKENS)
        conversion = convert_files(self.apf_file, self.sgm_file,
                                   token_file=tok_file)
        self.assertEqual(EXPECTED_COUNTS, conversion.graph.counts)
        self.assertEqual(4, len(list(conversion.document.sentences())))

    def test_idempotent(self):
        "same input, same output"
        def run():
            "convert with deterministic ids"
            conversion = convert_files(self.apf_file, self.sgm_file,
                                       ids=CounterGenerator('x'))
            return ET.tostring(graph_to_xml(conversion.document,
                                            conversion.graph))
        self.assertEqual(run(), run())

    def test_random_ids(self):
        "fresh ids, same structure"
        conv1 = convert_files(self.apf_file, self.sgm_file)
        conv2 = convert_files(self.apf_file, self.sgm_file)
        self.assertEqual(conv1.graph.counts, conv2.graph.counts)
        self.assertEqual([(m.tokens.start, m.tokens.end, m.tokens.anchor)
                          for m in conv1.graph.entity_mentions],
                         [(m.tokens.start, m.tokens.end, m.tokens.anchor)
                          for m in conv2.graph.entity_mentions])
        self.assertNotEqual(conv1.graph.entities[0].uid,
                            conv2.graph.entities[0].uid)


class CorpusTest(unittest.TestCase):
    "pairing annotation files with source documents"

    def setUp(self):
        self.tmpdir = tempfile.mkdtemp()
        self.apf_file = os.path.join(self.tmpdir, 'TEST-1.apf.xml')
        self.sgm_file = os.path.join(self.tmpdir, 'TEST-1.sgm')
        ET.ElementTree(mk_apf()).write(self.apf_file, encoding='utf-8')
        with codecs.open(self.sgm_file, 'w', 'utf-8') as stream:
            stream.write(SGM)
        self.outdir = os.path.join(self.tmpdir, 'out')

    def tearDown(self):
        shutil.rmtree(self.tmpdir)

    def add_orphan(self):
        "annotation file with no source document"
        orphan = os.path.join(self.tmpdir, 'BAD.apf.xml')
        shutil.copy(self.apf_file, orphan)
        return orphan

    def add_broken(self):
        """
        annotation files sorting before the good one: one that is not
        well-formed XML, one with offsets going backwards
        """
        truncated = os.path.join(self.tmpdir, 'AAA.apf.xml')
        with codecs.open(truncated, 'w', 'utf-8') as stream:
            stream.write('<source_file><document DOCID="AAA">')
        shutil.copy(self.sgm_file, os.path.join(self.tmpdir, 'AAA.sgm'))

        root = mk_apf()
        cseq = root.find('.//charseq')
        cseq.set('START', '9')
        cseq.set('END', '2')
        inverted = os.path.join(self.tmpdir, 'AAB.apf.xml')
        ET.ElementTree(root).write(inverted, encoding='utf-8')
        shutil.copy(self.sgm_file, os.path.join(self.tmpdir, 'AAB.sgm'))
        return truncated, inverted

    def test_files(self):
        "pairs by suffix"
        reader = Reader(self.tmpdir)
        self.assertEqual({FileId('TEST-1', 'apf'):
                          (self.apf_file, self.sgm_file)},
                         reader.files())
        self.assertEqual(self.sgm_file, sgm_path(self.apf_file))
        self.assertEqual({}, reader.filter(reader.files(),
                                           lambda k: k.doc.startswith('CNN')))

    def test_missing(self):
        "no source document"
        orphan = self.add_orphan()
        self.assertRaises(MissingTextFileError, sgm_path, orphan)
        # listed all the same; converting it is what fails
        files = Reader(self.tmpdir).files()
        apf_file, sgm_file = files[FileId('BAD', 'apf')]
        self.assertEqual(orphan, apf_file)
        self.assertRaises(MissingTextFileError, convert_files,
                          apf_file, sgm_file)

    def test_malformed(self):
        "broken annotation files are reported as such"
        truncated, inverted = self.add_broken()
        for apf_file in [truncated, inverted]:
            self.assertRaises(AceXmlException, convert_files, apf_file,
                              self.sgm_file)


    def test_cli_single(self):
        "ace-util convert APF OUTPUT"
        out_file = os.path.join(self.tmpdir, 'single.xml')
        main(['convert', self.apf_file, out_file, '--deterministic-ids'])
        doc_id, counts = read_graph_counts(out_file)
        self.assertEqual('TEST-1', doc_id)
        self.assertEqual(EXPECTED_COUNTS, counts)
        main(['count', out_file])

    def test_cli_single_failure(self):
        "a fatal error ends the process"
        orphan = self.add_orphan()
        with self.assertRaises(SystemExit) as cm:
            main(['convert', orphan, os.path.join(self.tmpdir, 'bad.xml')])
        self.assertNotEqual(0, cm.exception.code)

    def test_cli_single_missing_sgm(self):
        "an explicit source document that is not there"
        missing = os.path.join(self.tmpdir, 'nowhere.sgm')
        with self.assertRaises(SystemExit) as cm:
            main(['convert', self.apf_file, missing,
                  os.path.join(self.tmpdir, 'bad.xml')])
        self.assertIn(missing, cm.exception.code)


    def test_cli_batch(self):
        "ace-util convert INPUT_DIR OUTPUT_DIR"
        main(['convert', self.tmpdir, self.outdir, '--entities-only'])
        _, counts = read_graph_counts(os.path.join(self.outdir,
                                                   'TEST-1.xml'))
        self.assertEqual(ConversionCounts(entities=4, entity_mentions=6,
                                          events=2, event_mentions=2,
                                          event_mention_roles=4),
                         counts)

    def test_cli_batch_failure(self):
        "one bad document does not stop the others"
        self.add_orphan()
        with self.assertRaises(SystemExit) as cm:
            main(['convert', self.tmpdir, self.outdir])
        self.assertEqual(1, cm.exception.code)
        self.assertTrue(os.path.exists(os.path.join(self.outdir,
                                                    'TEST-1.xml')))
        self.assertFalse(os.path.exists(os.path.join(self.outdir,
                                                     'BAD.xml')))

    def test_cli_batch_malformed(self):
        "broken annotation files do not stop the others"
        self.add_broken()
        with self.assertRaises(SystemExit) as cm:
            main(['convert', self.tmpdir, self.outdir])
        self.assertEqual(1, cm.exception.code)
        self.assertTrue(os.path.exists(os.path.join(self.outdir,
                                                    'TEST-1.xml')))
        for name in ['AAA.xml', 'AAB.xml']:
            self.assertFalse(os.path.exists(os.path.join(self.outdir,
                                                         name)))

    def test_cli_batch_doc(self):
        "ace-util convert INPUT_DIR OUTPUT_DIR --doc REGEX"
        self.add_orphan()
        self.add_broken()
        main(['convert', self.tmpdir, self.outdir, '--doc', 'TEST'])
        self.assertEqual(['TEST-1.xml'], os.listdir(self.outdir))


    def test_cli_check(self):
        "ace-util check APF"
        main(['check', self.apf_file])


if __name__ == '__main__':
    unittest.main()
