"""xt_crosstab command.

Builds a CrosstabRequest from the parsed arguments, runs the pivot and
prints a one-line summary. Errors propagate as XtabError subclasses and
are mapped to exit codes by cli.main.
"""

import argparse
import logging
import sys

from ...exceptions import InvalidArgumentError
from ...models.crosstab_request import CrosstabRequest
from ...services.crosstab import Crosstab
from ...types.enums import HeaderFormat
from ...utils.formatters import TableFormatter
from ...utils.logging import log_operation

logger = logging.getLogger(__name__)


def execute_crosstab(args: argparse.Namespace) -> int:
    """Run the crosstab command.

    Returns:
        0 on success
    """
    try:
        request = CrosstabRequest.from_cli_lists(
            infile=args.infile,
            outfile=args.outfile,
            rows=args.row,
            cols=args.col,
            values=args.value,
            header_format=args.format,
            delimiter=args.delimiter,
        )
    except ValueError as e:
        raise InvalidArgumentError(str(e), argument_name="--format",
                                   valid_values=[str(fmt.value) for fmt in HeaderFormat]) from e
    logger.debug("Crosstab request: %s", request.to_dict())

    with log_operation("crosstab", logger):
        result = Crosstab(request).run()

    if not args.quiet:
        warnings = []
        if result.duplicate_cells:
            warnings.append(f"{result.duplicate_cells} cells had more than one value; the first was kept")
        formatter = TableFormatter(sys.stdout)
        formatter.write(formatter.format_command_result(
            success=True,
            message=f"Wrote {result.row_count} rows x {result.column_count} columns to {result.outfile}",
            warnings=warnings,
        ))

    return 0
