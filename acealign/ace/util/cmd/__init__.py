"""
ace-util subcommands
"""

# License: BSD3

from . import (check,
               convert,
               count)

SUBCOMMANDS = [convert,
               check,
               count]
