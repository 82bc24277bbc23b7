# License: BSD3

"""
Command line options
"""

import os
import re
import sys

from acealign.document import CounterGenerator, UuidGenerator
from acealign.ace.corpus import doc_name, sgm_path


def add_verbosity_args(parser):
    """
    Augment a subcommand argparser with a repeatable verbosity flag
    """
    parser.add_argument('--verbose', '-v', action='count', default=0,
                        help='more logging (repeat for more detail)')


def add_conversion_args(parser):
    """
    Augment a subcommand argparser with the options controlling how
    documents are read and converted
    """
    parser.add_argument('--entities-only', action='store_true',
                        help='do not read time expressions, values and '
                        'event triggers as entities')
    parser.add_argument('--deterministic-ids', action='store_true',
                        help='number identifiers instead of generating '
                        'random ones')


def mk_ids(args, doc=None):
    """
    Identifier generator according to the command line arguments
    """
    if args.deterministic_ids:
        return CounterGenerator(doc or 'id')
    else:
        return UuidGenerator()


def add_corpus_filters(parser):
    """
    Augment a subcommand argparser with an option to limit directory
    mode to some documents

    Meant to be used in conjunction with `mk_is_interesting`
    """
    parser.add_argument('--doc', metavar='PY_REGEX',
                        help='Limit to documents whose name matches')


def mk_is_interesting(args):
    """
    Return a function that when given a FileId returns 'True'
    if the FileId would be considered interesting according to
    the arguments passed in.
    """
    if args.doc is None:
        return lambda _: True
    regex = re.compile(args.doc)
    return lambda fileid: regex.match(fileid.doc) is not None


def single_inputs(paths):
    """
    Annotation file, source document and output file from the
    positional arguments of single document mode: either all three,
    or the annotation file and output file (the source document is
    then found next to the annotation file)
    """
    if len(paths) == 3:
        return tuple(paths)
    elif len(paths) == 2:
        apf_file, out_file = paths
        return apf_file, sgm_path(apf_file), out_file
    else:
        sys.exit("Expected APF [SGM] OUTPUT or INPUT_DIR OUTPUT_DIR")


def output_path(output_dir, apf_file):
    """
    Where batch mode writes the conversion of an annotation file
    """
    return os.path.join(output_dir, doc_name(apf_file) + '.xml')


def get_output_dir(path):
    """
    Create the output directory if needed
    """
    if os.path.isfile(path):
        oops = "Sorry, %s already exists and is not a directory" % path
        sys.exit(oops)
    elif not os.path.isdir(path):
        os.makedirs(path)
    return path


def announce_output_dir(output_dir):
    """
    Tell the user where we saved the output
    """
    print("Output files written to", output_dir, file=sys.stderr)
