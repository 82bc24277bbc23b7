# License: BSD3

"""
Conventions specific to the ACE_ (Automatic Content Extraction) corpus:
annotation files, source documents and how they are paired up

.. _ACE: https://www.ldc.upenn.edu/collaborations/past-projects/ace
"""

from .corpus import Reader, MissingTextFileError, sgm_path
from .apf import read_apf_file
from .sgml import read_sgm_file
from .convert import convert, convert_files
