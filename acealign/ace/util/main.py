# License: BSD3

"""
Entry point for the ace-util command line utility
"""

import argparse
import sys

from acealign.internalutil import AceAlignException
from acealign.util import add_subcommand, setup_logging
from .cmd import SUBCOMMANDS


def mk_argparser():
    """
    Argument parser with one subparser per subcommand
    """
    arg_parser = argparse.ArgumentParser(description='ACE corpus '
                                         'conversion utilities')
    subparsers = arg_parser.add_subparsers(title='subcommands',
                                           dest='subcommand')
    subparsers.required = True
    for module in SUBCOMMANDS:
        subparser = add_subcommand(subparsers, module)
        module.config_argparser(subparser)
    return arg_parser


def main(argv=None):
    "ace-util main"
    args = mk_argparser().parse_args(argv)
    setup_logging(args.verbose)
    try:
        args.func(args)
    except (AceAlignException, IOError) as err:
        sys.exit("ERROR: %s" % err)
