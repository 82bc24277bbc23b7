# License: BSD3

# disable "pointless string" warning because we want attribute docstrings
# pylint: disable=W0105
# pylint: disable=too-few-public-methods, too-many-arguments

"""
Building the annotation graph of a document:

    entities -> entity mentions -> token ranges
    situations -> situation mentions -> arguments -> entity mentions

This happens in two stages. The first aligns every entity mention and
produces a read-only table from annotation mention id to output
mention; the second walks the events and resolves their arguments
against that table.

Entity mentions are gold annotations, so failing to align one aborts
the conversion. Event mention extents on the other hand sometimes
cross sentences because of annotation noise; for those we log and
leave the token range out.
"""

from collections import OrderedDict
import logging

from frozendict import frozendict

from .align import AlignmentError, align
from .internalutil import AceAlignException

_logger = logging.getLogger(__name__)

EVENT = 'EVENT'
"situation type of every situation we produce"


class ReferenceResolutionError(AceAlignException):
    """
    An event argument refers to an entity mention that we did not
    produce
    """
    def __init__(self, mention_id, role, target_id):
        self.mention_id = mention_id
        self.role = role
        self.target_id = target_id
        msg = "Event mention %s: %s argument refers to unknown entity "\
            "mention %s" % (mention_id, role, target_id)
        super(ReferenceResolutionError, self).__init__(msg)


# ---------------------------------------------------------------------
# output graph
# ---------------------------------------------------------------------


def type_subtype(thing):
    """
    Single type string for an entity or event. The output has no
    subtype field, so we glue the two together.
    """
    return '%s:%s' % (thing.type, thing.subtype)


class Entity(object):
    """An entity and the ids of its mentions"""
    def __init__(self, uid, etype, entity_id):
        self.uid = uid
        self.type = etype
        "TYPE:SUBTYPE"

        self.entity_id = entity_id
        "id in the annotation file"

        self.mention_ids = []


class EntityMention(object):
    """An entity mention aligned with tokens"""
    def __init__(self, uid, mention_id, phrase_type, entity_type, tokens):
        self.uid = uid
        self.mention_id = mention_id
        self.phrase_type = phrase_type
        self.entity_type = entity_type
        self.tokens = tokens
        "TokenRefSequence with an anchor"


class Situation(object):
    """An event and the ids of its mentions"""
    def __init__(self, uid, kind, event_id, features=None):
        self.uid = uid
        self.situation_type = EVENT
        self.kind = kind
        "TYPE:SUBTYPE"

        self.event_id = event_id
        self.features = features or {}
        "modality, polarity, genericity, tense"

        self.mention_ids = []


class MentionArgument(object):
    """Role filled by an entity mention"""
    def __init__(self, role, entity_mention_id):
        self.role = role
        self.entity_mention_id = entity_mention_id

    def __repr__(self):
        return 'MentionArgument(%r, %r)' % (self.role,
                                            self.entity_mention_id)


class SituationMention(object):
    """An event mention, its token range (if any) and arguments"""
    def __init__(self, uid, mention_id, kind, tokens):
        self.uid = uid
        self.mention_id = mention_id
        self.situation_type = EVENT
        self.kind = kind
        self.tokens = tokens
        "TokenRefSequence or None if the extent did not align"

        self.arguments = []


class ConversionCounts(object):
    """
    Running totals for reporting purposes
    """
    FIELDS = ['entities', 'entity_mentions', 'events', 'event_mentions',
              'event_mention_roles']

    def __init__(self, **kwargs):
        for field in self.FIELDS:
            setattr(self, field, kwargs.pop(field, 0))
        if kwargs:
            raise TypeError('unknown counts: %s' % ', '.join(kwargs))

    def __add__(self, other):
        return ConversionCounts(**dict((f, getattr(self, f) +
                                        getattr(other, f))
                                       for f in self.FIELDS))

    def __eq__(self, other):
        return isinstance(other, ConversionCounts) and\
            self.as_dict() == other.as_dict()

    def __ne__(self, other):
        return not self == other

    def as_dict(self):
        "field to count"
        return OrderedDict((f, getattr(self, f)) for f in self.FIELDS)

    def __str__(self):
        return ('#entities=%(entities)d #e-mentions=%(entity_mentions)d '
                '#events=%(events)d #eve-mentions=%(event_mentions)d '
                '#eve-mention-roles=%(event_mention_roles)d'
                % self.as_dict())


class AnnotationGraph(object):
    """
    Entities, situations and their mentions for one document
    """
    def __init__(self, entities, entity_mentions, situations,
                 situation_mentions, counts):
        self.entities = entities
        self.entity_mentions = entity_mentions
        self.situations = situations
        self.situation_mentions = situation_mentions
        self.counts = counts

    def entity_mention(self, uid):
        "entity mention with the given output id (KeyError if none)"
        for mention in self.entity_mentions:
            if mention.uid == uid:
                return mention
        raise KeyError(uid)


# ---------------------------------------------------------------------
# assembly
# ---------------------------------------------------------------------


def add_entities(apf_doc, doc, ids, counts):
    """
    Stage 1: align all entity mentions.

    Returns
    -------
    entities : [Entity]
    mentions : [EntityMention]
    table : frozendict(string, EntityMention)
        Annotation mention id to output mention

    Raises
    ------
    AlignmentError
        If any extent or head fails to align
    """
    entities = []
    mentions = []
    table = {}
    for a_entity in apf_doc.entities:
        entity = Entity(next(ids), type_subtype(a_entity), a_entity.id)
        for a_mention in a_entity.mentions:
            extent = align(doc, a_mention.extent, log_mismatch=True)
            head = align(doc, a_mention.head, log_mismatch=True)
            mention = EntityMention(next(ids),
                                    a_mention.id,
                                    a_mention.type,
                                    type_subtype(a_entity),
                                    extent.with_anchor(head.last()))
            table[a_mention.id] = mention
            mentions.append(mention)
            entity.mention_ids.append(mention.uid)
            counts.entity_mentions += 1
        entities.append(entity)
        counts.entities += 1
    return entities, mentions, frozendict(table)


def all_events(apf_doc):
    """
    Events that have at least one mention, each once, in the order
    we first see their mentions
    """
    events = OrderedDict()
    for a_mention in apf_doc.event_mentions.values():
        if a_mention.event_id not in events:
            events[a_mention.event_id] = apf_doc.event(a_mention.event_id)
    return list(events.values())


def _align_event_extent(doc, a_mention):
    """
    Token range for an event mention extent, or None if it does not
    align
    """
    try:
        return align(doc, a_mention.extent)
    except AlignmentError as err:
        _logger.warning('Skipping event mention token span (%s): %s',
                        a_mention.id, err)
        return None


def add_situations(apf_doc, doc, ids, table, counts):
    """
    Stage 2: events and their mentions, with arguments resolved
    through the (read-only) entity mention table from stage 1.

    Returns
    -------
    situations : [Situation]
    mentions : [SituationMention]

    Raises
    ------
    ReferenceResolutionError
        If an argument points to a mention missing from the table
    """
    situations = []
    mentions = []
    for a_event in all_events(apf_doc):
        kind = type_subtype(a_event)
        situation = Situation(next(ids), kind, a_event.id,
                              features=a_event.features())
        for a_mention in a_event.mentions:
            mention = SituationMention(next(ids), a_mention.id, kind,
                                       _align_event_extent(doc, a_mention))
            for a_arg in a_mention.args:
                target = table.get(a_arg.refid)
                if target is None:
                    raise ReferenceResolutionError(a_mention.id,
                                                   a_arg.role,
                                                   a_arg.refid)
                mention.arguments.append(MentionArgument(a_arg.role,
                                                         target.uid))
                counts.event_mention_roles += 1
            mentions.append(mention)
            situation.mention_ids.append(mention.uid)
            counts.event_mentions += 1
        situations.append(situation)
        counts.events += 1
    return situations, mentions


def assemble(apf_doc, doc, ids):
    """
    Build the annotation graph for a document whose sentences have
    already been placed

    Parameters
    ----------
    apf_doc : acealign.ace.apf.AceDocument
        Parsed annotations
    doc : acealign.document.Document
        Tokenized document
    ids : iterator of str
        Identifier source

    Returns
    -------
    graph : AnnotationGraph
    """
    counts = ConversionCounts()
    entities, e_mentions, table = add_entities(apf_doc, doc, ids, counts)
    situations, s_mentions = add_situations(apf_doc, doc, ids, table,
                                            counts)
    _logger.info('%s: %s', doc.doc_id, counts)
    return AnnotationGraph(entities, e_mentions, situations, s_mentions,
                           counts)
