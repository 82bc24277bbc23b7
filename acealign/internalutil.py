# License: BSD3

"""
Utility functions which are meant to be used by acealign but aren't
expected to be too useful outside of it
"""

import logging


TRACE = 5
"""
Logging level below DEBUG, for token by token detail
"""

logging.addLevelName(TRACE, 'TRACE')


class AceAlignException(Exception):
    """
    Base for the errors raised by this package
    """
    def __init__(self, *args, **kw):
        Exception.__init__(self, *args, **kw)


class AceXmlException(AceAlignException):
    """
    Annotation XML is missing something we need
    """
    def __init__(self, *args, **kw):
        AceAlignException.__init__(self, *args, **kw)


def on_single_element(root, default, f, name):
    """
    Return

       * the default if no elements
       * f(the node) if one element
       * an exception if more than one
    """
    nodes = root.findall(name)
    if len(nodes) == 0:
        if default is None:
            raise AceXmlException("Expected but did not find any nodes "
                                  "with name %s [in %s]" % (name, root.tag))
        else:
            return default
    elif len(nodes) > 1:
        raise AceXmlException("Found more than one node with "
                              "name %s [in %s]" % (name, root.tag))
    else:
        return f(nodes[0])


def get_attribute(node, name, default=None):
    """
    Value of an XML attribute; if there is no such attribute, return
    the default, or raise if no default was given
    """
    val = node.get(name)
    if val is None:
        if default is None:
            raise AceXmlException("Expected attribute %s on <%s %s>"
                                  % (name, node.tag, node.attrib))
        return default
    return val


def indent_xml(elem, level=0):
    """
    From <http://effbot.org/zone/element-lib.htm>

    WARNING: destructive
    """
    i = "\n" + level*"  "
    if len(elem):
        if not elem.text or not elem.text.strip():
            elem.text = i + "  "
        if not elem.tail or not elem.tail.strip():
            elem.tail = i
        for elem in elem:
            indent_xml(elem, level+1)
        if not elem.tail or not elem.tail.strip():
            elem.tail = i
    else:
        if level and (not elem.tail or not elem.tail.strip()):
            elem.tail = i
