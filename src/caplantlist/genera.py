"""Genus registry.

The static genus table (``genera.json``) maps every known genus to its family:

    {"Arctostaphylos": {"family": "Ericaceae"}, ...}

Taxa are bound to their genus, and through it to their family, as they are
loaded. A taxon whose genus is not in the table is a data error and stops the
load.
"""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from pathlib import Path
from typing import TYPE_CHECKING

from pyuca import Collator

if TYPE_CHECKING:
    from caplantlist.families import Families, Family
    from caplantlist.taxon import Taxon


_collator: Collator | None = None


def collation_key(name: str) -> tuple:
    """Sort key for names using the Unicode Collation Algorithm (root order)."""
    global _collator
    if _collator is None:
        _collator = Collator()
    return _collator.sort_key(name)


class GenusNotFoundError(LookupError):
    """Raised when a taxon's genus is missing from the genus table."""


@dataclass(frozen=True)
class GenusRecord:
    """A row of the static genus table."""

    name: str
    family: str


@dataclass
class Genus:
    """A genus with its resolved family and member taxa."""

    name: str
    family: Family
    _taxa: list[Taxon] = field(default_factory=list, repr=False)

    def _add_taxon(self, taxon: Taxon) -> None:
        self._taxa.append(taxon)

    def get_family(self) -> Family:
        return self.family

    def get_taxa(self) -> list[Taxon]:
        """Return member taxa sorted by name.

        Names are compared with Unicode collation, so case is a secondary
        difference and a hybrid sign sorts before letters.
        """
        return sorted(self._taxa, key=lambda t: collation_key(t.name))


class Genera:
    """Registry of genera built from the static genus table.

    Example:
        >>> families = Families.from_json("data/families.json")
        >>> genera = Genera.from_json("data/genera.json", families)
        >>> genera.get_genus("Arctostaphylos").get_family().name
        'Ericaceae'
    """

    def __init__(self, records: dict[str, GenusRecord], families: Families) -> None:
        self._records = records
        self._families = families
        self._genera: dict[str, Genus] = {}

    @classmethod
    def from_json(cls, path: str | Path, families: Families) -> Genera:
        """Load the genus table from a ``genera.json`` file."""
        path = Path(path)
        if not path.exists():
            raise FileNotFoundError(f"{path.name} not found in {path.parent}")

        with open(path, encoding="utf-8") as f:
            data = json.load(f)

        records = {
            name: GenusRecord(name=name, family=info["family"])
            for name, info in data.items()
        }
        return cls(records, families)

    def add_taxon(self, taxon: Taxon) -> Genus:
        """Bind a taxon to its genus and family.

        Returns:
            The taxon's genus.

        Raises:
            GenusNotFoundError: If the taxon's genus is not in the table.
        """
        genus_name = taxon.genus_name
        record = self._records.get(genus_name)
        if record is None:
            raise GenusNotFoundError(f"{taxon.name} genus not found")

        genus = self._genera.get(genus_name)
        if genus is None:
            genus = Genus(name=genus_name, family=self._families.get_family(record.family))
            self._genera[genus_name] = genus

        genus.family.add_taxon(taxon)
        genus._add_taxon(taxon)
        return genus

    def get_genus(self, name: str) -> Genus | None:
        """Find a genus that has at least one taxon."""
        return self._genera.get(name)

    def get_record(self, name: str) -> GenusRecord | None:
        """Find a genus in the static table."""
        return self._records.get(name)

    def __contains__(self, name: str) -> bool:
        return name in self._records

    def __len__(self) -> int:
        return len(self._records)
