# License: BSD3

"""
Compare entity mention text with the source document

Only reports; nothing is converted.
"""

from acealign.ace.apf import read_apf_file
from acealign.ace.corpus import sgm_path
from acealign.ace.sgml import read_sgm_file
from acealign.checks import check_entity_mentions
from ..args import add_verbosity_args

NAME = 'check'


def config_argparser(parser):
    """
    Subcommand flags.

    You should create and pass in the subparser to which the flags
    are to be added.
    """
    parser.add_argument('apf', metavar='APF', help='annotation file')
    parser.add_argument('sgm', metavar='SGM', nargs='?',
                        help='source document (default: next to APF)')
    add_verbosity_args(parser)
    parser.set_defaults(func=main)


def main(args):
    """
    Subcommand main.

    You shouldn't need to call this yourself if you're using
    `config_argparser`
    """
    sgm_file = args.sgm or sgm_path(args.apf)
    doc = read_sgm_file(sgm_file)
    apf_doc = read_apf_file(args.apf)
    mismatches = check_entity_mentions(apf_doc, doc.text)
    for mismatch in mismatches:
        print(mismatch)
    print("%d mismatched / %d entity mentions" %
          (len(mismatches), len(apf_doc.entity_mentions)))
