# License: BSD3

"""
Convert ACE documents into token aligned annotation graphs

Either one document (APF [SGM] OUTPUT) or every .apf.xml/.sgm pair
in a directory (INPUT_DIR OUTPUT_DIR). In directory mode, a failure
on one document is reported and the others are still converted.
"""

import logging
import os
import sys

from tabulate import tabulate

from acealign.ace.convert import convert_files
from acealign.ace.corpus import Reader, doc_name
from acealign.assembly import ConversionCounts
from acealign.internalutil import AceAlignException
from acealign.output import write_graph_file
from ..args import (add_conversion_args, add_corpus_filters,
                    add_verbosity_args, announce_output_dir,
                    get_output_dir, mk_ids, mk_is_interesting,
                    output_path, single_inputs)

_logger = logging.getLogger(__name__)

DOCUMENT_ERRORS = (AceAlignException, IOError, UnicodeError)
"""
What can go wrong with one document without affecting the others
"""


def config_argparser(parser):
    """
    Subcommand flags.

    You should create and pass in the subparser to which the flags
    are to be added.
    """
    parser.add_argument('paths', nargs='+', metavar='PATH',
                        help='APF [SGM] OUTPUT, or INPUT_DIR OUTPUT_DIR')
    parser.add_argument('--tokens', metavar='FILE',
                        help='pre-tokenized document (single document '
                        'mode only)')
    add_conversion_args(parser)
    add_corpus_filters(parser)
    add_verbosity_args(parser)
    parser.set_defaults(func=main)


def counts_table(counts, title='total'):
    """
    Counts as a two column table
    """
    rows = list(counts.as_dict().items())
    return tabulate(rows, headers=['', title])


def convert_one(args, apf_file, sgm_file, out_file, token_file=None):
    """
    Convert and write a single document; return its counts
    """
    conversion = convert_files(apf_file, sgm_file,
                               token_file=token_file,
                               ids=mk_ids(args, doc_name(apf_file)),
                               extras=not args.entities_only)
    write_graph_file(out_file, conversion.document, conversion.graph)
    return conversion.graph.counts


def convert_dir(args, input_dir, output_dir):
    """
    Convert every (selected) document in a directory

    Returns
    -------
    counts : ConversionCounts
        Totals over the documents that were converted
    failures : [(string, Exception)]
        Annotation files that could not be converted and why
    """
    reader = Reader(input_dir)
    files = reader.filter(reader.files(), mk_is_interesting(args))
    _logger.info('Found %d apf.xml files', len(files))
    total = ConversionCounts()
    failures = []
    for key in sorted(files):
        apf_file, sgm_file = files[key]
        try:
            total += convert_one(args, apf_file, sgm_file,
                                 output_path(output_dir, apf_file))
        except DOCUMENT_ERRORS as err:
            _logger.error('Could not convert %s: %s', apf_file, err)
            failures.append((apf_file, err))
    return total, failures



def main(args):
    """
    Subcommand main.

    You shouldn't need to call this yourself if you're using
    `config_argparser`
    """
    if os.path.isdir(args.paths[0]):
        if len(args.paths) != 2:
            sys.exit("Expected INPUT_DIR OUTPUT_DIR")
        if args.tokens:
            sys.exit("--tokens only works on a single document")
        output_dir = get_output_dir(args.paths[1])
        counts, failures = convert_dir(args, args.paths[0], output_dir)
        print(counts_table(counts))
        announce_output_dir(output_dir)
        if failures:
            print("", file=sys.stderr)
            print(tabulate([(f, str(e)) for f, e in failures],
                           headers=['failed', 'reason']),
                  file=sys.stderr)
            sys.exit(1)
    else:
        try:
            apf_file, sgm_file, out_file = single_inputs(args.paths)
            counts = convert_one(args, apf_file, sgm_file, out_file,
                                 token_file=args.tokens)
        except DOCUMENT_ERRORS as err:
            sys.exit("Could not convert %s: %s" % (args.paths[0], err))
        print(counts_table(counts))
