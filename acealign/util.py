# License: BSD3

"""
Miscellaneous utility functions
"""

from itertools import chain
import logging
import sys

from .internalutil import TRACE


def concat(items):
    ":: Iterable (Iterable a) -> Iterable a"
    return chain.from_iterable(items)


def add_subcommand(subparsers, module):
    '''
    Add a subcommand to an argparser following some conventions:

        - the module can have an optional NAME constant
          (giving the name of the command); otherwise we
          assume it's the unqualified module name
        - the first line of its docstring is its help text
        - subsequent lines (if any) form its epilog

    Returns the resulting subparser for the module
    '''

    if 'NAME' in module.__dict__:
        module_name = module.NAME
    else:
        module_name = module.__name__.split('.')[-1]

    module_help_parts = [x for x in module.__doc__.strip().split('\n', 1)
                         if x]
    if len(module_help_parts) > 1:
        module_help = module_help_parts[0]
        module_epilog = '\n'.join(module_help_parts[1:]).strip()
    else:
        module_help = module.__doc__
        module_epilog = None
    return subparsers.add_parser(module_name,
                                 help=module_help,
                                 epilog=module_epilog)


def verbosity_level(verbosity):
    """
    Logging level for a count of `-v` flags: warnings by default,
    then info, debug and finally trace
    """
    levels = [logging.WARNING, logging.INFO, logging.DEBUG, TRACE]
    return levels[min(verbosity, len(levels) - 1)]


def setup_logging(verbosity=0, stream=None):
    """
    Send the package's log records to stderr (or `stream`).

    Meant for scripts; library code never installs handlers.
    """
    level = verbosity_level(verbosity)
    logger = logging.getLogger('acealign')
    logger.setLevel(level)
    if not logger.handlers:
        handler = logging.StreamHandler(stream or sys.stderr)
        handler.setFormatter(
            logging.Formatter('%(levelname)s %(name)s: %(message)s'))
        logger.addHandler(handler)
    return logger
