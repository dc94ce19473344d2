"""The taxon record.

A taxon is built from one row of ``taxa.csv``. All values in the row are
strings; empty strings are stored as ``None``.
"""

from __future__ import annotations

import re
from typing import TYPE_CHECKING

from caplantlist.rareplants import get_rpi_rank_and_threat_descriptions

if TYPE_CHECKING:
    from caplantlist.config import Config
    from caplantlist.families import Family
    from caplantlist.genera import Genera, Genus
    from caplantlist.photos import InatPhoto


# Nativity status codes
STATUS_NATIVE = "N"
STATUS_CA_NATIVE = "NC"  # Native elsewhere in California, not locally
STATUS_UNCERTAIN = "U"
STATUS_INTRODUCED = "X"

# Synonym source formats
SYNONYM_TYPE_CALFLORA = "CF"
SYNONYM_TYPE_INAT = "INAT"

FLOWERING_SECTIONS = {"Ceratophyllales", "Eudicots", "Magnoliids", "Monocots", "Nymphaeales"}
NON_FLOWERING_SECTIONS = {"Ferns", "Gymnosperms", "Lycophytes"}

_INAT_RANK_PATTERN = re.compile(r" (subsp|var)\.")


def _optional(value: str | None) -> str | None:
    return value if value else None


def _split_list(value: str | None) -> list[str]:
    if not value:
        return []
    return [part.strip() for part in value.split(",")]


class Taxon:
    """A species, subspecies or variety in the plant list.

    The genus is resolved when the taxon is created, so a successfully
    constructed taxon always has a genus and a family.

    Example:
        >>> taxon = Taxon.from_row({"taxon_name": "Arctostaphylos glauca", "status": "N"}, genera)
        >>> taxon.base_file_name
        'Arctostaphylos-glauca'
        >>> taxon.is_native()
        True
    """

    def __init__(
        self,
        name: str,
        genera: Genera,
        *,
        common_names: list[str] | None = None,
        status: str | None = None,
        jepson_id: str | None = None,
        calrecnum: str | None = None,
        inat_id: str | None = None,
        cch2_id: str | None = None,
        fna: str | None = None,
        calscape_cn: str | None = None,
        life_cycle: str | None = None,
        flower_colors: list[str] | None = None,
        bloom_start: int | None = None,
        bloom_end: int | None = None,
        rpi_id: str | None = None,
        rank_rpi: str | None = None,
        cesa: str | None = None,
        fesa: str | None = None,
        rank_cnddb: str | None = None,
        rank_global: str | None = None,
    ) -> None:
        self._name = name
        self.genus_name = name.split(" ")[0]
        self.common_names = common_names or []
        self.status = status
        self.jepson_id = jepson_id
        self.calrecnum = calrecnum
        self.inat_id = inat_id
        self.cch2_id = cch2_id
        self._fna = fna
        self.calscape_common_name = calscape_cn
        self.life_cycle = life_cycle
        self.flower_colors = flower_colors
        self.bloom_start = bloom_start
        self.bloom_end = bloom_end
        self.rpi_id = rpi_id
        self.rpi_rank_and_threat = rank_rpi
        self.cesa = cesa
        self.fesa = fesa
        self.rank_cnddb = rank_cnddb
        self.rank_global = rank_global

        self._synonyms: list[str] = []
        self._cf_syn: str | None = None
        self._inat_syn: str | None = None
        self._photos: list[InatPhoto] = []

        self._genus: Genus = genera.add_taxon(self)

    @classmethod
    def from_row(cls, row: dict[str, str], genera: Genera) -> Taxon:
        """Create a taxon from a ``taxa.csv`` row.

        Raises:
            GenusNotFoundError: If the genus is not in the genus table.
        """
        bloom_start = row.get("bloom_start")
        bloom_end = row.get("bloom_end")
        colors = row.get("flower_color")

        return cls(
            row["taxon_name"],
            genera,
            common_names=_split_list(row.get("common name")),
            status=_optional(row.get("status")),
            jepson_id=_optional(row.get("jepson id")),
            calrecnum=_optional(row.get("calrecnum")),
            inat_id=_optional(row.get("inat id")),
            cch2_id=_optional(row.get("cch2_id")),
            fna=_optional(row.get("fna")),
            calscape_cn=_optional(row.get("calscape_cn")),
            life_cycle=_optional(row.get("life_cycle")),
            flower_colors=_split_list(colors) if colors else None,
            bloom_start=int(bloom_start) if bloom_start else None,
            bloom_end=int(bloom_end) if bloom_end else None,
            rpi_id=_optional(row.get("RPI ID")),
            rank_rpi=_optional(row.get("CRPR")),
            cesa=_optional(row.get("CESA")),
            fesa=_optional(row.get("FESA")),
            rank_cnddb=_optional(row.get("SRank")),
            rank_global=_optional(row.get("GRank")),
        )

    @property
    def name(self) -> str:
        return self._name

    def __repr__(self) -> str:
        return f"Taxon({self._name!r}, status={self.status!r})"

    # Relationships

    def get_genus(self) -> Genus:
        return self._genus

    def get_family(self) -> Family:
        return self._genus.get_family()

    # Synonyms

    def add_synonym(self, syn: str, syn_type: str) -> None:
        """Record a former name.

        Calflora and iNaturalist synonyms are also kept separately, since those
        sites may still list the taxon under the old name.
        """
        self._synonyms.append(syn)
        if syn_type == SYNONYM_TYPE_CALFLORA:
            self._cf_syn = syn
        elif syn_type == SYNONYM_TYPE_INAT:
            self._inat_syn = syn

    @property
    def synonyms(self) -> list[str]:
        return self._synonyms

    @property
    def calflora_synonym(self) -> str | None:
        return self._cf_syn

    @property
    def inat_synonym(self) -> str | None:
        return self._inat_syn

    # Photos

    def add_photo(self, photo: InatPhoto) -> None:
        self._photos = self._photos + [photo]

    def get_photos(self) -> list[InatPhoto]:
        return self._photos

    # Name-derived values

    @property
    def base_file_name(self) -> str:
        return self._name.replace(" ", "-").replace(".", "")

    def file_name(self, ext: str = "html") -> str:
        return f"{self.base_file_name}.{ext}"

    @property
    def calflora_name(self) -> str:
        if self._cf_syn:
            return self._cf_syn
        return self._name.replace(" subsp.", " ssp.", 1).replace("×", "X", 1)

    @property
    def calscape_name(self) -> str:
        return Taxon.get_calscape_name(self._name)

    @staticmethod
    def get_calscape_name(name: str) -> str:
        return name.replace(" subsp.", " ssp.", 1)

    @property
    def inat_name(self) -> str:
        """Name in iNaturalist format: no rank token, and a space after the hybrid sign."""
        name = self._inat_syn if self._inat_syn else self._name
        return _INAT_RANK_PATTERN.sub("", name, count=1).replace("×", "× ", 1)

    @property
    def fna_name(self) -> str | None:
        if self._fna == "true":
            return self._name
        return self._fna

    # External links

    @property
    def calflora_url(self) -> str | None:
        if not self.calrecnum:
            return None
        return f"https://www.calflora.org/app/taxon?crn={self.calrecnum}"

    @property
    def inat_url(self) -> str | None:
        if not self.inat_id:
            return None
        return f"https://www.inaturalist.org/taxa/{self.inat_id}"

    @property
    def rpi_url(self) -> str | None:
        if not self.rpi_id:
            return None
        return f"https://rareplants.cnps.org/Plants/Details/{self.rpi_id}"

    # Status

    def get_status_description(self, config: Config | None = None) -> str:
        """Human-readable nativity status.

        Raises:
            ValueError: If the status code is not recognized.
        """
        if self.status == STATUS_NATIVE:
            return "Native"
        if self.status == STATUS_CA_NATIVE:
            if config is None:
                return "Introduced"
            return config.get_label("status-NC", "Introduced")
        if self.status == STATUS_UNCERTAIN:
            return "Nativity Uncertain"
        if self.status == STATUS_INTRODUCED:
            return "Introduced"
        raise ValueError(f"unrecognized status {self.status!r} for {self._name}")

    def is_native(self) -> bool:
        """True if the taxon is native locally (not just elsewhere in California)."""
        return self.status == STATUS_NATIVE

    def is_ca_native(self) -> bool:
        """True if the taxon is native anywhere in California."""
        return self.status in (STATUS_NATIVE, STATUS_CA_NATIVE)

    # Rarity

    @property
    def rpi_rank(self) -> str | None:
        if not self.rpi_rank_and_threat:
            return None
        return self.rpi_rank_and_threat.split(".")[0]

    def is_rare(self) -> bool:
        return self.rpi_rank is not None

    @property
    def rpi_rank_and_threat_tooltip(self) -> str:
        return "<br>".join(get_rpi_rank_and_threat_descriptions(self.rpi_rank_and_threat))

    @property
    def css_class(self) -> str:
        """Class names for links to this taxon."""
        class_name = "native" if self.is_native() else "non-native"
        if self.is_rare():
            class_name += " rare"
        return class_name

    def should_have_flowers(self) -> bool:
        """Whether members of this taxon's family are expected to flower.

        Raises:
            ValueError: If the family's section is not a known section.
        """
        section_name = self.get_family().section_name
        if section_name in FLOWERING_SECTIONS:
            return True
        if section_name in NON_FLOWERING_SECTIONS:
            return False
        raise ValueError(f"unexpected section {section_name!r} for {self._name}")
