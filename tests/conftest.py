"""Shared fixtures: a small reference data set and taxon list."""

from __future__ import annotations

import csv
import json
from pathlib import Path

import pytest

from caplantlist.errorlog import ErrorLog
from caplantlist.families import Families
from caplantlist.genera import Genera
from caplantlist.photos import InatPhoto
from caplantlist.taxa import Taxa

FAMILIES = {
    "Ericaceae": {"section": "Eudicots"},
    "Pinaceae": {"section": "Gymnosperms"},
    "Pteridaceae": {"section": "Ferns"},
    "Liliaceae": {"section": "Monocots"},
    "Fagaceae": {"section": "Eudicots"},
    "Oddaceae": {"section": "Bryophytes"},
}

GENERA = {
    "Arctostaphylos": {"family": "Ericaceae"},
    "Arbutus": {"family": "Ericaceae"},
    "Pinus": {"family": "Pinaceae"},
    "Adiantum": {"family": "Pteridaceae"},
    "Calochortus": {"family": "Liliaceae"},
    "Quercus": {"family": "Fagaceae"},
    "Oddus": {"family": "Oddaceae"},
}

TAXA_HEADERS = [
    "taxon_name", "common name", "status", "jepson id", "calrecnum", "inat id",
    "cch2_id", "fna", "calscape_cn", "life_cycle", "flower_color", "bloom_start",
    "bloom_end", "RPI ID", "CRPR", "CESA", "FESA", "SRank", "GRank",
]

TAXA_ROWS = [
    {"taxon_name": "Arctostaphylos manzanita", "common name": "common manzanita", "status": "N",
     "inat id": "53410", "flower_color": "white,pink", "bloom_start": "1", "bloom_end": "4"},
    {"taxon_name": "Arctostaphylos glauca", "common name": "bigberry manzanita, Glaucous manzanita",
     "status": "N", "inat id": "47602", "calrecnum": "652", "flower_color": "white"},
    {"taxon_name": "Arctostaphylos pallida", "status": "N", "inat id": "57111", "CRPR": "1B.1",
     "CESA": "CE", "FESA": "FT", "SRank": "S1", "GRank": "G1", "RPI ID": "101"},
    {"taxon_name": "Arbutus menziesii", "common name": "Pacific madrone", "status": "NC",
     "inat id": "48548", "fna": "true"},
    {"taxon_name": "Pinus radiata", "common name": "Monterey pine", "status": "X", "inat id": "48461"},
    {"taxon_name": "Adiantum jordanii", "status": "U"},
    {"taxon_name": "Calochortus albus", "status": "N", "inat id": "51241", "flower_color": ""},
]

SYNONYMS = [
    {"Current": "Arctostaphylos glauca", "Former": "Arctostaphylos glauca var. puberula", "Type": "INAT"},
    {"Current": "Arbutus menziesii", "Former": "Arbutus procera", "Type": ""},
    {"Current": "Arbutus menziesii", "Former": "Arbutus menziesii ssp. old", "Type": "CF"},
    {"Current": "Not in list", "Former": "Whatever", "Type": "CF"},
]


def write_taxa_csv(path: Path, rows: list[dict]) -> None:
    with open(path, "w", encoding="utf-8", newline="") as f:
        writer = csv.DictWriter(f, fieldnames=TAXA_HEADERS, restval="")
        writer.writeheader()
        writer.writerows(rows)


def write_photo_csv(path: Path, rows: list[list[str]]) -> None:
    with open(path, "w", encoding="utf-8", newline="") as f:
        writer = csv.writer(f)
        writer.writerow(["name", "id", "ext", "licenseCode", "attrName"])
        writer.writerows(rows)


def photo(photo_id: str | int) -> InatPhoto:
    return InatPhoto(id=str(photo_id), ext="jpg", license_code="cc-by", attr_name="Jane Doe")


class FakeProvider:
    """Photo provider returning canned candidates and recording requests."""

    def __init__(self, photos: dict[str, list[InatPhoto]]) -> None:
        self.photos = photos
        self.requests: list[list[str]] = []

    def get_taxon_photos(self, taxa):
        self.requests.append([taxon.name for taxon in taxa])
        requested = {taxon.name for taxon in taxa}
        return {name: list(p) for name, p in self.photos.items() if name in requested}


@pytest.fixture
def reference_dir(tmp_path: Path) -> Path:
    ref = tmp_path / "reference"
    ref.mkdir()
    (ref / "families.json").write_text(json.dumps(FAMILIES), encoding="utf-8")
    (ref / "genera.json").write_text(json.dumps(GENERA), encoding="utf-8")
    with open(ref / "synonyms.csv", "w", encoding="utf-8", newline="") as f:
        writer = csv.DictWriter(f, fieldnames=["Current", "Former", "Type"])
        writer.writeheader()
        writer.writerows(SYNONYMS)
    return ref


@pytest.fixture
def data_dir(tmp_path: Path) -> Path:
    data = tmp_path / "data"
    data.mkdir(exist_ok=True)
    write_taxa_csv(data / "taxa.csv", TAXA_ROWS)
    return data


@pytest.fixture
def photo_file(tmp_path: Path) -> Path:
    path = tmp_path / "data" / "inattaxonphotos.csv"
    path.parent.mkdir(exist_ok=True)
    write_photo_csv(
        path,
        [
            ["Arctostaphylos glauca", "1", "jpg", "cc-by", "Ann"],
            ["Arctostaphylos glauca", "2", "jpeg", "cc-by-nc", "Bob"],
            ["Arctostaphylos glauca", "3", "jpg", "cc0", ""],
            ["Pinus radiata", "10", "jpg", "cc-by", "Cy"],
            ["Pinus radiata", "11", "jpg", "cc-by", "Cy"],
            ["Pinus radiata", "12", "jpg", "cc-by", "Cy"],
            ["Pinus radiata", "13", "jpg", "cc-by", "Cy"],
            ["Pinus radiata", "14", "jpg", "cc-by", "Cy"],
            ["Old name not in list", "20", "jpg", "cc-by", "Dee"],
            ["Old name not in list", "21", "jpg", "cc-by", "Dee"],
        ],
    )
    return path


@pytest.fixture
def error_log(tmp_path: Path) -> ErrorLog:
    return ErrorLog(tmp_path / "output" / "errors.tsv")


@pytest.fixture
def genera(reference_dir: Path) -> Genera:
    families = Families.from_json(reference_dir / "families.json")
    return Genera.from_json(reference_dir / "genera.json", families)


@pytest.fixture
def taxa(data_dir: Path, reference_dir: Path, photo_file: Path, error_log: ErrorLog) -> Taxa:
    return Taxa(data_dir, error_log, photo_file=photo_file, reference_dir=reference_dir)
