"""Cross-tabulation of normalized tables.

Reads a table in normalized (long) form, where every line carries the row
key columns, the column key columns and one or more value columns, and
writes it out in wide form:

    region,year,sales,units          region,2023_sales,2023_units,2024_sales,2024_units
    East,2023,10,1           --->    East,10,1,12,2
    East,2024,12,2                   West,7,1,,
    West,2023,7,1

Each (row key, column key) cell should hold exactly one value per value
column. When it holds more, a warning is logged and the first value in
file order is kept; values are never combined.
"""

import csv
import logging
import re
from pathlib import Path
from typing import Any, Dict, List, Sequence, Tuple

import pandas as pd

from ..exceptions import CrosstabError, InputFileError, OutputFileError
from ..models.crosstab_request import CrosstabRequest, CrosstabResult
from ..types.enums import HeaderFormat

logger = logging.getLogger(__name__)

Key = Tuple[str, ...]

_NUMBER_RE = re.compile(r"^[+-]?(\d+\.?\d*|\.\d+)([eE][+-]?\d+)?$")


def _sort_token(value: str) -> Tuple[int, float, str]:
    """Order numbers numerically, before any text; equal numbers fall back to their text."""
    if _NUMBER_RE.match(value.strip()):
        return (0, float(value), value)
    return (1, 0.0, value)


def natural_key(key: Key) -> Tuple[Tuple[int, float, str], ...]:
    return tuple(_sort_token(part) for part in key)


def read_table(path: Path, delimiter: str = ",") -> pd.DataFrame:
    """Read the input table with every field kept as text.

    Raises:
        InputFileError: If the file is missing, empty or malformed
    """
    path = Path(path)
    if not path.is_file():
        raise InputFileError(f"The input file does not exist: {path}", path=path)

    try:
        df = pd.read_csv(path, sep=delimiter, dtype=str, keep_default_na=False)
    except pd.errors.EmptyDataError as e:
        raise InputFileError(f"The input file is empty: {path}", path=path, original_error=e) from e
    except pd.errors.ParserError as e:
        raise InputFileError(f"Cannot parse {path}: {e}", path=path, original_error=e) from e
    except UnicodeDecodeError as e:
        raise InputFileError(f"The input file is not UTF-8 text: {path}", path=path, original_error=e) from e

    df.columns = [str(column).strip() for column in df.columns]
    logger.debug("Read %d rows x %d columns from %s", len(df), len(df.columns), path)
    return df


def check_request(request: CrosstabRequest) -> None:
    """Validate a request before touching any file.

    Raises:
        OutputFileError: If the output file is not a .csv file
        CrosstabError: If a column list is empty or a column has two roles
    """
    if request.outfile.suffix.lower() != ".csv":
        raise OutputFileError(f"The output file must be a .csv file: {request.outfile}", path=request.outfile)

    for label, columns in (("row header", request.row_headers),
                           ("column header", request.col_headers),
                           ("value", request.values)):
        if not columns:
            raise CrosstabError(f"At least one {label} column is required")

    seen: Dict[str, str] = {}
    for role, columns in (("row", request.row_headers), ("col", request.col_headers), ("value", request.values)):
        for column in columns:
            if column in seen:
                if seen[column] == role:
                    raise CrosstabError(f"Column '{column}' is listed twice as a {role} column")
                raise CrosstabError(f"Column '{column}' cannot be both a {seen[column]} and a {role} column")
            seen[column] = role


def build_header_rows(request: CrosstabRequest, col_keys: Sequence[Key]) -> List[List[str]]:
    """Header lines for the chosen header format."""
    rows, cols, values = request.row_headers, request.col_headers, request.values
    blanks = [""] * len(rows)
    value_names = [value for _ in col_keys for value in values]

    if request.header_format is HeaderFormat.JOINED:
        return [list(rows) + ["_".join(list(key) + [value]) for key in col_keys for value in values]]

    if request.header_format is HeaderFormat.TWO_ROWS:
        return [
            blanks + ["_".join(key) for key in col_keys for _ in values],
            list(rows) + value_names,
        ]

    labeled = request.header_format is HeaderFormat.LABELED_ROW_PER_COLUMN
    header_rows = []
    for level, name in enumerate(cols):
        cells = []
        for key in col_keys:
            label = f"{name}={key[level]}" if labeled else key[level]
            cells.extend([label] * len(values))
        header_rows.append(blanks + cells)
    header_rows.append(list(rows) + value_names)
    return header_rows


class Crosstab:
    """Builds a cross-table for one request."""

    def __init__(self, request: CrosstabRequest):
        self.request = request

    def tabulate(self, df: pd.DataFrame) -> Tuple[List[List[str]], List[List[str]], int]:
        """Pivot df into header rows and data rows.

        Returns:
            (header_rows, data_rows, duplicate_cells)

        Raises:
            CrosstabError: If a requested column is missing from df
        """
        request = self.request
        missing = [column for column in request.all_columns() if column not in df.columns]
        if missing:
            raise CrosstabError(
                f"Columns not found in the input file: {', '.join(missing)}. "
                f"Available columns: {', '.join(df.columns)}",
                missing_columns=missing,
            )

        keys = request.row_headers + request.col_headers
        n_rows = len(request.row_headers)
        grouped = df.groupby(keys, sort=False, dropna=False)

        sizes = grouped.size()
        duplicates = sizes[sizes > 1]
        if len(duplicates):
            logger.warning(
                "%d cells have more than one value; only the first value is used (e.g. %s)",
                len(duplicates), dict(zip(keys, duplicates.index[0])),
            )

        first = grouped[request.values].first()
        cells: Dict[Key, Dict[str, Any]] = {}
        for index, record in zip(first.index, first.to_dict("records")):
            cells[tuple(str(part) for part in index)] = record

        row_keys = sorted({key[:n_rows] for key in cells}, key=natural_key)
        col_keys = sorted({key[n_rows:] for key in cells}, key=natural_key)

        data_rows = []
        for row_key in row_keys:
            line = list(row_key)
            for col_key in col_keys:
                record = cells.get(row_key + col_key, {})
                line.extend(str(record.get(value, "")) for value in request.values)
            data_rows.append(line)

        return build_header_rows(request, col_keys), data_rows, len(duplicates)

    def run(self) -> CrosstabResult:
        """Read the input, pivot it and write the output file.

        Raises:
            InputFileError, OutputFileError, CrosstabError
        """
        request = self.request
        check_request(request)

        df = read_table(request.infile, request.delimiter)
        header_rows, data_rows, duplicate_cells = self.tabulate(df)

        write_csv(request.outfile, header_rows + data_rows)
        logger.info("Wrote %d rows to %s", len(data_rows), request.outfile)

        return CrosstabResult(
            outfile=request.outfile,
            row_count=len(data_rows),
            column_count=len(header_rows[-1]),
            duplicate_cells=duplicate_cells,
            header_rows=header_rows,
        )


def write_csv(path: Path, lines: List[List[str]]) -> None:
    """Write lines as CSV.

    Raises:
        OutputFileError: If the file cannot be written
    """
    try:
        with open(path, "w", newline="", encoding="utf-8") as f:
            writer = csv.writer(f)
            writer.writerows(lines)
    except OSError as e:
        raise OutputFileError(f"Cannot write {path}: {e.strerror or e}", path=path, original_error=e) from e


def crosstab(request: CrosstabRequest) -> CrosstabResult:
    """Convenience wrapper around Crosstab(request).run()."""
    return Crosstab(request).run()
