# License: BSD3

"""
Writing converted documents out as XML

.. code-block:: xml

  <communication id="CNN_CF_20030303.1900.00">
    <text>...</text>
    <section id="..." kind="TURN" start="0" end="120">
      <sentence id="..." start="0" end="20">
        <tokenization id="...">
          <token index="0" start="0" end="4">John</token>
          ...
    <entitySet>
      <entity id="..." type="PER:Individual" aceId="...">
        <mentionRef id="..."/>
    <entityMentionSet>
      <entityMention id="..." aceId="..." phraseType="NAM"
                     entityType="PER:Individual">
        <tokens tokenization="..." anchor="0">0 1</tokens>
    <situationSet>
      <situation id="..." type="EVENT" kind="Conflict:Attack" ...>
    <situationMentionSet>
      <situationMention id="..." type="EVENT" kind="Conflict:Attack">
        <tokens .../>
        <argument role="Attacker" entityMentionId="..."/>
"""

import codecs
import xml.etree.ElementTree as ET

from .assembly import ConversionCounts
from .internalutil import indent_xml, on_single_element


def _tokens_to_xml(tokens):
    elm = ET.Element('tokens', tokenization=tokens.tokenization_id)
    if tokens.anchor is not None:
        elm.set('anchor', str(tokens.anchor))
    elm.text = ' '.join(str(i) for i in tokens.indices())
    return elm


def _span_attrs(elm, span):
    elm.set('start', str(span.char_start))
    elm.set('end', str(span.char_end))
    return elm


def document_to_xml(doc):
    """
    Text, sections, sentences and tokens of a document
    """
    elms = []
    text_elm = ET.Element('text')
    text_elm.text = doc.text
    elms.append(text_elm)
    for section in doc.sections:
        s_elm = _span_attrs(ET.Element('section', id=section.sid), section.span)
        if section.kind is not None:
            s_elm.set('kind', section.kind)
        for sentence in section.sentences:
            sent_elm = _span_attrs(ET.Element('sentence', id=sentence.sid),
                                   sentence.span)
            tkn_elm = ET.Element('tokenization',
                                 id=sentence.tokenization.tid)
            for tok in sentence.tokenization:
                tok_elm = _span_attrs(ET.Element('token',
                                                 index=str(tok.index)),
                                      tok.span)
                tok_elm.text = tok.text
                tkn_elm.append(tok_elm)
            sent_elm.append(tkn_elm)
            s_elm.append(sent_elm)
        elms.append(s_elm)
    return elms


def graph_to_xml(doc, graph):
    """
    The whole converted document as an XML element
    """
    root = ET.Element('communication', id=doc.doc_id or '')
    root.extend(document_to_xml(doc))

    counts_elm = ET.Element('counts')
    for key, val in graph.counts.as_dict().items():
        counts_elm.set(key, str(val))
    root.append(counts_elm)

    es_elm = ET.SubElement(root, 'entitySet')
    for entity in graph.entities:
        e_elm = ET.SubElement(es_elm, 'entity', id=entity.uid,
                              type=entity.type, aceId=entity.entity_id)
        for mid in entity.mention_ids:
            ET.SubElement(e_elm, 'mentionRef', id=mid)

    ems_elm = ET.SubElement(root, 'entityMentionSet')
    for mention in graph.entity_mentions:
        m_elm = ET.SubElement(ems_elm, 'entityMention', id=mention.uid,
                              aceId=mention.mention_id,
                              phraseType=mention.phrase_type,
                              entityType=mention.entity_type)
        m_elm.append(_tokens_to_xml(mention.tokens))

    ss_elm = ET.SubElement(root, 'situationSet')
    for situation in graph.situations:
        s_elm = ET.SubElement(ss_elm, 'situation', id=situation.uid,
                              type=situation.situation_type,
                              kind=situation.kind,
                              aceId=situation.event_id)
        for key, val in situation.features.items():
            s_elm.set(key, val)
        for mid in situation.mention_ids:
            ET.SubElement(s_elm, 'mentionRef', id=mid)

    sms_elm = ET.SubElement(root, 'situationMentionSet')
    for mention in graph.situation_mentions:
        m_elm = ET.SubElement(sms_elm, 'situationMention', id=mention.uid,
                              aceId=mention.mention_id,
                              type=mention.situation_type,
                              kind=mention.kind)
        if mention.tokens is not None:
            m_elm.append(_tokens_to_xml(mention.tokens))
        for arg in mention.arguments:
            ET.SubElement(m_elm, 'argument', role=arg.role,
                          entityMentionId=arg.entity_mention_id)
    return root


def write_graph_file(fname, doc, graph):
    """
    Write a converted document to XML in the given path
    """
    elem = graph_to_xml(doc, graph)
    indent_xml(elem)
    with codecs.open(fname, 'w', 'utf-8') as fout:
        fout.write(ET.tostring(elem, encoding='unicode'))
        fout.write('\n')


def read_graph_counts(fname):
    """
    Counts recorded in a file written by `write_graph_file`

    Returns
    -------
    doc_id : str
    counts : acealign.assembly.ConversionCounts
    """
    root = ET.parse(fname).getroot()
    counts_elm = on_single_element(root, None, lambda x: x, 'counts')
    counts = ConversionCounts(**dict((k, int(counts_elm.get(k, 0)))
                                     for k in ConversionCounts.FIELDS))
    return root.get('id'), counts
