# License: BSD3

# disable "pointless string" warning because we want attribute docstrings
# pylint: disable=W0105
# pylint: disable=too-few-public-methods, too-many-arguments

"""
Reader for ACE annotation files (`.apf.xml`)

Abridged example:

.. code-block:: xml

  <source_file URI="CNN_CF_20030303.1900.00.sgm" SOURCE="broadcast news">
    <document DOCID="CNN_CF_20030303.1900.00">
      <entity ID="CNN_CF_20030303.1900.00-E1" TYPE="PER" SUBTYPE="Individual"
              CLASS="SPC">
        <entity_mention ID="CNN_CF_20030303.1900.00-E1-2" TYPE="NAM"
                        LDCTYPE="NAM">
          <extent><charseq START="490" END="498">Paula Zahn</charseq></extent>
          <head><charseq START="490" END="498">Paula Zahn</charseq></head>
        </entity_mention>
      </entity>
      ...
      <event ID="CNN_CF_20030303.1900.00-EV1" TYPE="Conflict" SUBTYPE="Attack"
             MODALITY="Asserted" POLARITY="Positive" GENERICITY="Specific"
             TENSE="Past">
        <event_mention ID="CNN_CF_20030303.1900.00-EV1-1">
          <extent>...</extent>
          <ldc_scope><charseq START="..." END="...">...</charseq></ldc_scope>
          <anchor><charseq START="..." END="...">...</charseq></anchor>
          <event_mention_argument REFID="CNN_CF_20030303.1900.00-E1-2"
                                  ROLE="Attacker">
            ...
          </event_mention_argument>
        </event_mention>
      </event>
    </document>
  </source_file>

IMPORTANT: character offsets in ACE are inclusive on both ends
(see `acealign.annotation.CharSeq`).

Event mention arguments whose REFID is not an entity mention we know
about are dropped. With the default settings, time expressions,
values and event triggers are read as entities too, so most of them
do resolve.
"""

from collections import OrderedDict, namedtuple
import logging
import xml.etree.ElementTree as ET

from acealign.annotation import CharSeq
from acealign.internalutil import (AceXmlException, get_attribute,
                                   on_single_element)

_logger = logging.getLogger(__name__)

TRIGGER = 'TRIGGER'

VALUE_TYPES = {'Numeric': 'NUM',
               'Contact-Info': 'CTI',
               'Crime': 'CRM',
               'Job-Title': 'JOB',
               'Sentence': 'SEN'}
"""
Short names for value types
"""


class AceEntity(object):
    """
    An entity and its mentions
    """
    def __init__(self, eid, etype, subtype, cls):
        self.id = eid
        self.type = etype
        self.subtype = subtype
        self.cls = cls
        self.mentions = []

    def __str__(self):
        return '%s %s:%s' % (self.id, self.type, self.subtype)


class AceEntityMention(object):
    """
    A single mention of an entity

    :param mtype: phrase type (eg. NAM, NOM, PRO)
    :param extent: whole mention
    :type extent: CharSeq
    :param head: head of the mention
    :type head: CharSeq
    """
    def __init__(self, mid, mtype, ldctype, extent, head, entity_id):
        self.id = mid
        self.type = mtype
        self.ldctype = ldctype
        self.extent = extent
        self.head = head
        self.entity_id = entity_id
        "id of the entity it is a mention of"

    def __str__(self):
        return '%s %s %s' % (self.id, self.type, self.extent)


AceEventMentionArgument = namedtuple('AceEventMentionArgument',
                                     'role refid')


class AceEvent(object):
    """
    An event and its mentions
    """
    def __init__(self, eid, etype, subtype, modality=None, polarity=None,
                 genericity=None, tense=None):
        self.id = eid
        self.type = etype
        self.subtype = subtype
        self.modality = modality
        self.polarity = polarity
        self.genericity = genericity
        self.tense = tense
        self.mentions = []

    def features(self):
        """
        Event attributes other than its type (those that are set)
        """
        fields = [('modality', self.modality),
                  ('polarity', self.polarity),
                  ('genericity', self.genericity),
                  ('tense', self.tense)]
        return OrderedDict((k, v) for k, v in fields if v is not None)


class AceEventMention(object):
    """
    A single mention of an event

    :param extent: the scope of the mention (`ldc_scope`)
    :param anchor: the trigger word(s)
    """
    def __init__(self, mid, extent, anchor, event_id):
        self.id = mid
        self.extent = extent
        self.anchor = anchor
        self.event_id = event_id
        self.args = []
        "list of AceEventMentionArgument"


class AceDocument(object):
    """
    Everything read from one annotation file
    """
    def __init__(self, doc_id):
        self.doc_id = doc_id
        self.entities = []
        self.entity_mentions = OrderedDict()
        self.events = []
        self.event_mentions = OrderedDict()

    def add_entity(self, entity):
        "register an entity (and its mentions)"
        self.entities.append(entity)
        for mention in entity.mentions:
            self.entity_mentions[mention.id] = mention

    def add_event(self, event):
        "register an event (and its mentions)"
        self.events.append(event)
        for mention in event.mentions:
            self.event_mentions[mention.id] = mention

    def event(self, eid):
        "event with the given id (KeyError if none)"
        for event in self.events:
            if event.id == eid:
                return event
        raise KeyError(eid)


# ---------------------------------------------------------------------
# xml
# ---------------------------------------------------------------------


def read_charseq(node):
    """
    The `charseq` element under the given node
    """
    def read(child):
        "charseq element"
        start = get_attribute(child, 'START')
        end = get_attribute(child, 'END')
        try:
            return CharSeq(child.text or '', int(start), int(end))
        except ValueError as err:
            raise AceXmlException('Bad charseq [%s, %s] in %s: %s' %
                                  (start, end, node.tag, err))

    return on_single_element(node, None, read, 'charseq')


def _child_charseq(node, name):
    return on_single_element(node, None, read_charseq, name)


def read_entity_mention(node, entity_id):
    """
    Extracts one entity mention
    """
    return AceEntityMention(get_attribute(node, 'ID'),
                            get_attribute(node, 'TYPE'),
                            get_attribute(node, 'LDCTYPE', ''),
                            _child_charseq(node, 'extent'),
                            _child_charseq(node, 'head'),
                            entity_id)


def read_extent_mention(node, mtype, entity_id):
    """
    Extracts a mention which has no head (timex2, values); its extent
    doubles as head
    """
    extent = _child_charseq(node, 'extent')
    return AceEntityMention(get_attribute(node, 'ID'), mtype, mtype,
                            extent, extent, entity_id)


def read_trigger(node):
    """
    An event mention anchor, as an entity with a single mention
    """
    mid = get_attribute(node, 'ID')
    entity = AceEntity(mid + '-' + TRIGGER, TRIGGER, TRIGGER, TRIGGER)
    anchor = _child_charseq(node, 'anchor')
    entity.mentions.append(AceEntityMention(trigger_id(mid), TRIGGER,
                                            TRIGGER, anchor, anchor,
                                            entity.id))
    return entity


def trigger_id(mention_id):
    """
    Id of the trigger entity mention for an event mention
    """
    return mention_id + '-' + TRIGGER + '-0'


def read_event_mention(node, event_id, doc):
    """
    Extracts one event mention; arguments are kept only if they refer
    to an entity mention already in the document
    """
    mid = get_attribute(node, 'ID')
    mention = AceEventMention(mid,
                              _child_charseq(node, 'ldc_scope'),
                              _child_charseq(node, 'anchor'),
                              event_id)
    if trigger_id(mid) in doc.entity_mentions:
        mention.args.append(AceEventMentionArgument(TRIGGER,
                                                    trigger_id(mid)))
    for arg in node.findall('event_mention_argument'):
        role = get_attribute(arg, 'ROLE')
        refid = get_attribute(arg, 'REFID')
        if refid in doc.entity_mentions:
            mention.args.append(AceEventMentionArgument(role, refid))
        else:
            _logger.debug('Dropping %s argument of %s (%s is not an '
                          'entity mention)', role, mid, refid)
    return mention


def _read_entities(root, doc):
    for node in root.iter('entity'):
        entity = AceEntity(get_attribute(node, 'ID'),
                           get_attribute(node, 'TYPE'),
                           get_attribute(node, 'SUBTYPE', ''),
                           get_attribute(node, 'CLASS', ''))
        entity.mentions.extend(read_entity_mention(x, entity.id)
                               for x in node.findall('entity_mention'))
        doc.add_entity(entity)


def _read_extras(root, doc):
    for node in root.iter('timex2'):
        entity = AceEntity(get_attribute(node, 'ID'), 'TIM', 'time', 'TIM')
        entity.mentions.extend(read_extent_mention(x, 'TIM', entity.id)
                               for x in node.findall('timex2_mention'))
        doc.add_entity(entity)

    for node in root.iter('value'):
        vtype = get_attribute(node, 'TYPE')
        vtype = VALUE_TYPES.get(vtype, vtype)
        if vtype in ['NUM', 'CTI']:
            subtype = get_attribute(node, 'SUBTYPE', '')
        else:
            subtype = vtype
        entity = AceEntity(get_attribute(node, 'ID'), vtype, subtype, vtype)
        entity.mentions.extend(read_extent_mention(x, vtype, entity.id)
                               for x in node.findall('value_mention'))
        doc.add_entity(entity)

    for node in root.iter('event_mention'):
        doc.add_entity(read_trigger(node))


def _read_events(root, doc):
    for node in root.iter('event'):
        event = AceEvent(get_attribute(node, 'ID'),
                         get_attribute(node, 'TYPE'),
                         get_attribute(node, 'SUBTYPE', ''),
                         modality=node.get('MODALITY'),
                         polarity=node.get('POLARITY'),
                         genericity=node.get('GENERICITY'),
                         tense=node.get('TENSE'))
        event.mentions.extend(read_event_mention(x, event.id, doc)
                              for x in node.findall('event_mention'))
        doc.add_event(event)


def read_apf(root, extras=True):
    """
    Read an ACE document from the root of a parsed apf.xml file

    Parameters
    ----------
    root : xml.etree.ElementTree.Element
    extras : boolean
        Also read time expressions, values and event triggers as
        entities

    Returns
    -------
    doc : AceDocument
    """
    if root.tag == 'document':
        doc_elm = root
    else:
        doc_elm = on_single_element(root, None, lambda x: x, 'document')
    doc = AceDocument(get_attribute(doc_elm, 'DOCID'))
    _read_entities(doc_elm, doc)
    if extras:
        _read_extras(doc_elm, doc)
    _read_events(doc_elm, doc)
    return doc


def read_apf_file(fname, extras=True):
    """
    Read an ACE annotation file

    See `read_apf`
    """
    _logger.info('Reading apf file: %s', fname)
    try:
        tree = ET.parse(fname)
    except ET.ParseError as err:
        raise AceXmlException("Could not parse %s: %s" % (fname, err))
    return read_apf(tree.getroot(), extras=extras)
