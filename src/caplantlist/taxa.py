"""Taxon list loader.

Builds the family/genus/taxon graph for a site:

1. Load the reference registries (families, genera) from bundled data
2. Create one Taxon per row of ``<datadir>/taxa.csv``
3. Attach synonyms and photos to the taxa that were loaded

All relationships are in place before ``Taxa`` is returned.
"""

from __future__ import annotations

import csv
from pathlib import Path
from typing import TYPE_CHECKING

from caplantlist.config import DEFAULT_PHOTO_FILE, Config
from caplantlist.families import Families
from caplantlist.genera import Genera
from caplantlist.photos import read_photos
from caplantlist.taxon import Taxon

if TYPE_CHECKING:
    from collections.abc import Iterator

    from caplantlist.errorlog import ErrorLog


TAXA_FILE_NAME = "taxa.csv"
SYNONYMS_FILE_NAME = "synonyms.csv"


def read_csv(path: str | Path) -> Iterator[dict[str, str]]:
    """Yield the rows of a CSV file with a header line."""
    with open(path, encoding="utf-8", newline="") as f:
        yield from csv.DictReader(f)


class Taxa:
    """The taxon list for a site, in file order.

    Example:
        >>> taxa = Taxa("data", ErrorLog("output/errors.tsv"))
        >>> taxon = taxa.get_taxon("Arctostaphylos glauca")
        >>> taxon.get_family().name
        'Ericaceae'
    """

    def __init__(
        self,
        data_dir: str | Path,
        error_log: ErrorLog,
        show_flower_errors: bool = False,
        *,
        photo_file: str | Path | None = DEFAULT_PHOTO_FILE,
        reference_dir: str | Path | None = None,
    ) -> None:
        """Load the taxon list.

        Args:
            data_dir: Directory containing ``taxa.csv``.
            error_log: Where data problems are recorded.
            show_flower_errors: Log flowering taxa with no flower color.
            photo_file: Photo table to attach photos from; None to skip.
            reference_dir: Directory with families.json, genera.json and
                synonyms.csv; defaults to the bundled data.

        Raises:
            FileNotFoundError: If ``taxa.csv`` or reference data is missing.
            GenusNotFoundError: If a taxon's genus is unknown.
        """
        data_dir = Path(data_dir)
        reference_dir = Path(reference_dir) if reference_dir else Config.get_package_data_dir()
        self.error_log = error_log

        taxa_file = data_dir / TAXA_FILE_NAME
        if not taxa_file.exists():
            raise FileNotFoundError(f"{TAXA_FILE_NAME} not found in {data_dir}")

        self.families = Families.from_json(reference_dir / "families.json")
        self.genera = Genera.from_json(reference_dir / "genera.json", self.families)

        self._taxa: dict[str, Taxon] = {}
        for row in read_csv(taxa_file):
            name = row["taxon_name"]
            if name in self._taxa:
                error_log.log(name, "duplicate taxon in", TAXA_FILE_NAME)
                continue
            self._taxa[name] = Taxon.from_row(row, self.genera)

        synonyms_file = reference_dir / SYNONYMS_FILE_NAME
        if synonyms_file.exists():
            self._load_synonyms(synonyms_file)

        if photo_file is not None:
            self._load_photos(photo_file)

        if show_flower_errors:
            self._check_flower_colors()

    def _load_synonyms(self, path: Path) -> None:
        for row in read_csv(path):
            taxon = self._taxa.get(row["Current"])
            if taxon is None:
                continue
            taxon.add_synonym(row["Former"], row.get("Type") or "")

    def _load_photos(self, path: str | Path) -> None:
        for name, photos in read_photos(path).items():
            taxon = self._taxa.get(name)
            if taxon is None:
                continue
            for photo in photos:
                taxon.add_photo(photo)

    def _check_flower_colors(self) -> None:
        for taxon in self._taxa.values():
            if taxon.should_have_flowers() and not taxon.flower_colors:
                self.error_log.log(taxon.name, "does not have flower color")

    def get_taxon(self, name: str) -> Taxon | None:
        return self._taxa.get(name)

    def get_taxon_list(self) -> list[Taxon]:
        return list(self._taxa.values())

    def __len__(self) -> int:
        return len(self._taxa)

    def __contains__(self, name: str) -> bool:
        return name in self._taxa
