"""Tab-separated audit log.

Entries are collected in memory and written once, when the operation that
produced them has finished.
"""

from __future__ import annotations

import csv
from pathlib import Path


class ErrorLog:
    """Accumulates log rows and writes them as a TSV file.

    Example:
        >>> log = ErrorLog("output/log.tsv", echo=True)
        >>> log.log("adding photo", "Arctostaphylos glauca", "12345")
        >>> log.write()
    """

    def __init__(self, path: str | Path, echo: bool = False) -> None:
        self.path = Path(path)
        self.echo = echo
        self.entries: list[list[str]] = []

    def log(self, *args: object) -> None:
        """Record one row. Each argument becomes a column."""
        row = [str(arg) for arg in args]
        self.entries.append(row)
        if self.echo:
            print("\t".join(row))

    def has_errors(self) -> bool:
        return bool(self.entries)

    def write(self) -> None:
        """Write all rows recorded so far."""
        self.path.parent.mkdir(parents=True, exist_ok=True)
        with open(self.path, "w", encoding="utf-8", newline="") as f:
            writer = csv.writer(f, delimiter="\t", lineterminator="\n")
            writer.writerows(self.entries)
