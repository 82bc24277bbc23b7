# License: BSD3

"""
ACE corpus management (re-exported by acealign.ace)

A corpus directory holds pairs of files sharing a base name: the
annotations (`.apf.xml`) and the source document (`.sgm`).
"""

from glob import glob
import os

from acealign.corpus import FileId
from acealign.internalutil import AceAlignException
import acealign.corpus

APF_SUFFIX = '.apf.xml'
SGM_SUFFIX = '.sgm'


class MissingTextFileError(AceAlignException):
    """
    An annotation file has no companion source document
    """
    def __init__(self, apf_file, sgm_file):
        self.apf_file = apf_file
        self.sgm_file = sgm_file
        msg = ".sgm file can not be found in expected location: %s" %\
            sgm_file
        super(MissingTextFileError, self).__init__(msg)


def expected_sgm_path(apf_file):
    """
    Where the source document for an annotation file should be
    (whether or not it is actually there)
    """
    if apf_file.endswith(APF_SUFFIX):
        return apf_file[:-len(APF_SUFFIX)] + SGM_SUFFIX
    else:
        return os.path.splitext(apf_file)[0] + SGM_SUFFIX


def sgm_path(apf_file):
    """
    Path of the source document for an annotation file

    Raises
    ------
    MissingTextFileError
        If there is no such file
    """
    sgm_file = expected_sgm_path(apf_file)
    if not os.path.exists(sgm_file):
        raise MissingTextFileError(apf_file, sgm_file)
    return sgm_file


def mk_key(doc):
    """
    Return an corpus key for a given document name
    """
    return FileId(doc=doc, stage='apf')


def doc_name(apf_file):
    """
    Document name for an annotation file
    """
    bname = os.path.basename(apf_file)
    if bname.endswith(APF_SUFFIX):
        return bname[:-len(APF_SUFFIX)]
    return os.path.splitext(bname)[0]


class Reader(acealign.corpus.Reader):
    """
    See `acealign.corpus.Reader` for details
    """
    def __init__(self, corpusdir):
        acealign.corpus.Reader.__init__(self, corpusdir)

    def apf_files(self):
        """
        Annotation files in the corpus directory, sorted by name
        """
        full_glob = os.path.join(self.rootdir, '*' + APF_SUFFIX)
        return sorted(glob(full_glob))

    def files(self):
        """
        Dictionary from FileId to (apf file, sgm file).

        The sgm file is where the source document should be; it is
        not checked for here, so that a missing one only affects its
        own document (see `acealign.ace.convert.convert_files`)
        """
        return dict((mk_key(doc_name(f)), (f, expected_sgm_path(f)))
                    for f in self.apf_files())

