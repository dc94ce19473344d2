"""iNaturalist photo curation.

Each taxon keeps up to ``MAX_PHOTOS`` iNaturalist photos, stored in a CSV
table with one row per photo:

    name,id,ext,licenseCode,attrName
    Arctostaphylos glauca,12345,jpg,cc-by,Jane Doe

The curator fills gaps from a photo provider, prunes rows for taxa that are
no longer in the taxon list, and reports taxa without enough photos. The
table is always rewritten in full, sorted by taxon name.
"""

from __future__ import annotations

import csv
import os
import stat
import tempfile
from dataclasses import dataclass
from pathlib import Path
from typing import TYPE_CHECKING, Protocol

from caplantlist.config import MAX_PHOTOS, PHOTO_FILE_NAME

if TYPE_CHECKING:
    from collections.abc import Iterable

    from caplantlist.errorlog import ErrorLog
    from caplantlist.taxa import Taxa
    from caplantlist.taxon import Taxon


PHOTO_TABLE_HEADERS = ["name", "id", "ext", "licenseCode", "attrName"]

INAT_PHOTO_URL = "https://inaturalist-open-data.s3.amazonaws.com/photos"


@dataclass(frozen=True)
class InatPhoto:
    """A photo hosted on iNaturalist."""

    id: str
    ext: str
    license_code: str = ""
    attr_name: str = ""

    def get_url(self, size: str = "medium") -> str:
        """URL of the image at one of iNaturalist's sizes (square, small, medium, large, original)."""
        return f"{INAT_PHOTO_URL}/{self.id}/{size}.{self.ext}"


class PhotoProvider(Protocol):
    """Source of candidate photos for taxa."""

    def get_taxon_photos(self, taxa: list[Taxon]) -> dict[str, list[InatPhoto]]:
        """Return candidate photos keyed by taxon name, in preference order."""
        ...


def merge_photos(
    existing: list[InatPhoto],
    candidates: Iterable[InatPhoto],
    cap: int = MAX_PHOTOS,
) -> list[InatPhoto]:
    """Append new candidate photos to an existing list.

    Candidates are taken in order. A candidate whose ID is already in the list
    is skipped, and nothing more is added once the list holds ``cap`` photos.
    Existing photos keep their position and are never removed.

    Args:
        existing: Photos already on file for the taxon.
        candidates: New photos, in the provider's order.
        cap: Maximum number of photos per taxon.

    Returns:
        A new list; ``existing`` is not modified.
    """
    merged = list(existing)
    ids = {photo.id for photo in merged}
    for photo in candidates:
        if len(merged) >= cap:
            break
        if photo.id in ids:
            continue
        merged.append(photo)
        ids.add(photo.id)
    return merged


def read_photos(path: str | Path) -> dict[str, list[InatPhoto]]:
    """Read the photo table, grouped by taxon name.

    A missing file is an empty table.
    """
    path = Path(path)
    taxon_photos: dict[str, list[InatPhoto]] = {}
    if not path.exists():
        return taxon_photos

    with open(path, encoding="utf-8", newline="") as f:
        reader = csv.DictReader(f)
        for row in reader:
            photos = taxon_photos.setdefault(row["name"], [])
            photos.append(
                InatPhoto(
                    id=str(row["id"]),
                    ext=row.get("ext") or "",
                    license_code=row.get("licenseCode") or "",
                    attr_name=row.get("attrName") or "",
                )
            )

    return taxon_photos


def _get_umask() -> int:
    umask = os.umask(0)
    os.umask(umask)
    return umask


def write_photos(path: str | Path, taxon_photos: dict[str, list[InatPhoto]]) -> None:
    """Replace the photo table with the contents of ``taxon_photos``.

    Rows are sorted by taxon name; photos within a taxon keep their order.
    The file is written to a temporary name first and then moved into place,
    keeping the permissions of the table it replaces.
    """
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)

    fd, tmp_name = tempfile.mkstemp(dir=path.parent, prefix=f".{path.name}.", suffix=".tmp")
    try:
        with os.fdopen(fd, "w", encoding="utf-8", newline="") as f:
            writer = csv.writer(f, lineterminator="\n")
            writer.writerow(PHOTO_TABLE_HEADERS)
            for taxon_name in sorted(taxon_photos):
                for photo in taxon_photos[taxon_name]:
                    writer.writerow(
                        [taxon_name, photo.id, photo.ext, photo.license_code, photo.attr_name or ""]
                    )
        if path.exists():
            mode = stat.S_IMODE(path.stat().st_mode)
        else:
            mode = 0o666 & ~_get_umask()
        os.chmod(tmp_name, mode)
        os.replace(tmp_name, path)
    except BaseException:
        os.unlink(tmp_name)
        raise


class PhotoCurator:
    """Keeps the photo table in step with the taxon list.

    Example:
        >>> curator = PhotoCurator(taxa, "data/inattaxonphotos.csv", log)
        >>> curator.add_missing_photos(INatPhotoProvider())
        >>> log.write()
    """

    def __init__(
        self,
        taxa: Taxa,
        photo_file: str | Path,
        error_log: ErrorLog,
        *,
        max_photos: int = MAX_PHOTOS,
    ) -> None:
        self.taxa = taxa
        self.photo_file = Path(photo_file)
        self.error_log = error_log
        self.max_photos = max_photos

    def get_taxa_missing_photos(self) -> list[Taxon]:
        """Taxa with fewer than the maximum number of photos."""
        return [
            taxon
            for taxon in self.taxa.get_taxon_list()
            if len(taxon.get_photos()) < self.max_photos
        ]

    def add_missing_photos(self, provider: PhotoProvider) -> dict[str, list[InatPhoto]]:
        """Fetch photos for taxa below the maximum and add them to the table.

        Only taxa that need photos are sent to the provider, in one request.
        Provider errors propagate and nothing is written.

        Returns:
            The photos added, keyed by taxon name.
        """
        taxa_missing_photos = self.get_taxa_missing_photos()
        new_photos = provider.get_taxon_photos(taxa_missing_photos)
        current_taxa_photos = read_photos(self.photo_file)

        added: dict[str, list[InatPhoto]] = {}
        for taxon_name, candidates in new_photos.items():
            current_photos = current_taxa_photos.get(taxon_name, [])
            merged = merge_photos(current_photos, candidates, self.max_photos)
            new = merged[len(current_photos):]
            if not new:
                continue
            current_taxa_photos[taxon_name] = merged
            added[taxon_name] = new
            for photo in new:
                self.error_log.log("adding photo", taxon_name, photo.id)

        write_photos(self.photo_file, current_taxa_photos)
        return added

    def check_missing(self, min_photos: int | None = None) -> list[tuple[str, int]]:
        """Report taxa without the expected number of photos.

        Without ``min_photos``, any taxon that does not have exactly the maximum
        is reported. With it, only taxa below ``min_photos`` are reported.
        Nothing is written to the photo table.
        """
        missing = []
        for taxon in self.taxa.get_taxon_list():
            count = len(taxon.get_photos())
            if min_photos is None:
                is_missing = count != self.max_photos
            else:
                is_missing = count < min_photos
            if is_missing:
                self.error_log.log(taxon.name, str(count))
                missing.append((taxon.name, count))
        return missing

    def prune(self, update: bool = False) -> list[str]:
        """Find photo rows whose taxon is not in the taxon list.

        Each such taxon is logged. With ``update``, all of its rows are removed
        and the table is rewritten; otherwise the table is left alone.

        Returns:
            Names of the taxa that are not in the taxon list.
        """
        current_taxa_photos = read_photos(self.photo_file)

        invalid_names = []
        for name in current_taxa_photos:
            if self.taxa.get_taxon(name) is None:
                self.error_log.log(name, f"is in {PHOTO_FILE_NAME} but not in taxa list")
                invalid_names.append(name)

        if update:
            for name in invalid_names:
                del current_taxa_photos[name]
            write_photos(self.photo_file, current_taxa_photos)

        return invalid_names
