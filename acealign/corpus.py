# License: BSD3

"""
Corpus management
"""
#
# A corpus is a set of documents, each made of files that belong
# together (eg. annotations and source text).
#
# We try to be somewhat agnostic to your directory structure.
# To this end we provide a FileId class. Give us a mapping from
# FileId to filepaths and we do the rest.


class FileId:
    """
    Information needed to uniquely identify a document in a corpus.

    :param doc: document name
    :type doc:  string

    :param stage: what kind of files (eg. 'apf'); distinct stages
        of the same document could live side by side
    :type stage: string
    """
    def __init__(self, doc, stage=None):
        self.doc = doc
        self.stage = stage

    def __str__(self):
        return "%s %s" % (self.doc, self.stage)

    def __repr__(self):
        return "FileId(%r, %r)" % (self.doc, self.stage)

    def _tuple(self):
        """
        For internal use by __hash__, __eq__, etc
        """
        return (self.doc, self.stage)

    def __hash__(self):
        return hash(self._tuple())

    def __eq__(self, other):
        return self._tuple() == other._tuple()

    def __ne__(self, other):
        return not self == other

    def __lt__(self, other):
        return self._tuple() < other._tuple()


class Reader:
    """
    `Reader` provides little more than dictionaries from `FileId`
    to data.

    :param rootdir: the top directory of the corpus
    :type rootdir: str

    A potentially useful pattern to apply here is to take a slice of
    these dictionaries for processing

    .. code-block:: python

        reader = Reader(corpus_dir)
        files = reader.files()
        subfiles = reader.filter(files, lambda k: k.doc.startswith('CNN'))

    This is an abstract class; you should use the version from a
    data-set, eg. `acealign.ace.Reader` instead
    """
    def __init__(self, root):
        self.rootdir = root

    def files(self):
        """
        Return a dictionary from FileId to (tuples of) filepaths.
        The tuples correspond to files that are considered to 'belong'
        together; for example, in the case of standoff annotation, both
        the text file and its annotations
        """
        raise NotImplementedError()

    def filter(self, d, pred):
        """
        Convenience function equivalent to ::

            { k:v for k,v in d.items() if pred(k) }
        """
        return dict([(k, v) for k, v in d.items() if pred(k)])
