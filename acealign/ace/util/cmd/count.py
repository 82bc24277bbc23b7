# License: BSD3

"""
Show number of entities, events and mentions in converted files
"""

from tabulate import tabulate

from acealign.assembly import ConversionCounts
from acealign.output import read_graph_counts
from ..args import add_verbosity_args


def config_argparser(parser):
    """
    Subcommand flags.

    You should create and pass in the subparser to which the flags
    are to be added.
    """
    parser.add_argument('files', nargs='+', metavar='FILE',
                        help='output of the convert subcommand')
    add_verbosity_args(parser)
    parser.set_defaults(func=main)


def summary(doc_counts):
    """
    (Multi-line) string summary of per document counts, with a final
    line for the total
    """
    total = ConversionCounts()
    rows = []
    for doc, counts in doc_counts:
        rows.append([doc] + list(counts.as_dict().values()))
        total += counts
    rows.append(["TOTAL"] + list(total.as_dict().values()))
    headers = ["document"] + ConversionCounts.FIELDS
    return tabulate(rows, headers=headers)


def main(args):
    """
    Subcommand main.

    You shouldn't need to call this yourself if you're using
    `config_argparser`
    """
    print(summary([read_graph_counts(f) for f in args.files]))
