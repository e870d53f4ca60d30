"""Request and result models for the crosstab command."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Iterable, List, Optional

from ..types.enums import HeaderFormat


def split_column_list(values: Optional[Iterable[str]]) -> List[str]:
    """Flatten repeated, comma-separated column arguments.

    ``["a,b", " c "]`` becomes ``["a", "b", "c"]``; empty entries are dropped.
    """
    columns: List[str] = []
    for value in values or []:
        for part in value.split(","):
            part = part.strip()
            if part:
                columns.append(part)
    return columns


@dataclass
class CrosstabRequest:
    """Everything needed to build one cross-table.

    Attributes:
        infile: Normalized input table; first line holds the column names
        outfile: CSV file to create
        row_headers: Columns whose unique values start every output line
        col_headers: Columns whose unique values become output column groups
        values: Columns whose values fill the cells
        header_format: Layout of the output header rows
        delimiter: Field separator of the input file
    """
    infile: Path
    outfile: Path
    row_headers: List[str]
    col_headers: List[str]
    values: List[str]
    header_format: HeaderFormat = HeaderFormat.JOINED
    delimiter: str = ","

    @classmethod
    def from_cli_lists(cls, infile: str, outfile: str, rows: Iterable[str], cols: Iterable[str],
                       values: Iterable[str], header_format: int = 1,
                       delimiter: str = ",") -> CrosstabRequest:
        """Build a request from raw argparse values.

        Raises:
            ValueError: If header_format is not between 1 and 4
        """
        return cls(
            infile=Path(infile),
            outfile=Path(outfile),
            row_headers=split_column_list(rows),
            col_headers=split_column_list(cols),
            values=split_column_list(values),
            header_format=HeaderFormat.from_value(header_format),
            delimiter=delimiter,
        )

    def all_columns(self) -> List[str]:
        return self.row_headers + self.col_headers + self.values

    def to_dict(self) -> Dict[str, Any]:
        return {
            "infile": str(self.infile),
            "outfile": str(self.outfile),
            "row_headers": list(self.row_headers),
            "col_headers": list(self.col_headers),
            "values": list(self.values),
            "header_format": int(self.header_format),
            "delimiter": self.delimiter,
        }


@dataclass
class CrosstabResult:
    """Outcome of a crosstab run.

    Attributes:
        outfile: File that was written
        row_count: Number of data lines written (unique row keys)
        column_count: Number of columns per data line
        duplicate_cells: Cells that had more than one input value
        header_rows: Header lines written before the data
    """
    outfile: Path
    row_count: int
    column_count: int
    duplicate_cells: int = 0
    header_rows: List[List[str]] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "outfile": str(self.outfile),
            "row_count": self.row_count,
            "column_count": self.column_count,
            "duplicate_cells": self.duplicate_cells,
            "header_rows": [list(row) for row in self.header_rows],
        }
