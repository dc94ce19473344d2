"""Plant families and the sections (Eudicots, Ferns, ...) they belong to.

Reference data comes from ``families.json``, which maps each family name to
its section:

    {"Ericaceae": {"section": "Eudicots"}, "Pinaceae": {"section": "Gymnosperms"}}
"""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from pathlib import Path
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from caplantlist.taxon import Taxon


@dataclass
class Family:
    """A plant family.

    Attributes:
        name: The family name (e.g. 'Ericaceae').
        section_name: Higher grouping used to decide whether members flower.
        taxa: Member taxa, in the order they were added.
    """

    name: str
    section_name: str | None = None
    taxa: list[Taxon] = field(default_factory=list)

    def add_taxon(self, taxon: Taxon) -> None:
        """Record a taxon as a member of this family."""
        self.taxa.append(taxon)

    def __repr__(self) -> str:
        return f"Family({self.name!r}, section={self.section_name!r}, taxa={len(self.taxa)})"


class Families:
    """Registry of families, keyed by name.

    Families are created on first request and cached for the rest of the run.
    """

    def __init__(self, sections: dict[str, str] | None = None) -> None:
        """Initialize the registry.

        Args:
            sections: Mapping of family name to section name.
        """
        self._sections = dict(sections or {})
        self._families: dict[str, Family] = {}

    @classmethod
    def from_json(cls, path: str | Path) -> Families:
        """Load family sections from a ``families.json`` file."""
        path = Path(path)
        if not path.exists():
            raise FileNotFoundError(f"{path.name} not found in {path.parent}")

        with open(path, encoding="utf-8") as f:
            data = json.load(f)

        return cls({name: info.get("section") for name, info in data.items()})

    def get_family(self, name: str) -> Family:
        """Return the family with this name, creating it if necessary."""
        family = self._families.get(name)
        if family is None:
            family = Family(name=name, section_name=self._sections.get(name))
            self._families[name] = family
        return family

    def get_families(self) -> list[Family]:
        """All families created so far, sorted by name."""
        return sorted(self._families.values(), key=lambda f: f.name)
