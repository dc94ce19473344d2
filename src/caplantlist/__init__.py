"""California plant list - taxonomy reference and iNaturalist photo curation."""

__version__ = "0.1.0"

from caplantlist.config import MAX_PHOTOS, Config
from caplantlist.errorlog import ErrorLog

# Taxonomy graph
from caplantlist.families import Families, Family
from caplantlist.genera import Genera, Genus, GenusNotFoundError, GenusRecord
from caplantlist.taxon import Taxon
from caplantlist.taxa import Taxa

# Photo curation
from caplantlist.photos import (
    InatPhoto,
    PhotoCurator,
    merge_photos,
    read_photos,
    write_photos,
)
from caplantlist.inat import INatPhotoProvider

from caplantlist.rareplants import get_rpi_rank_and_threat_descriptions

__all__ = [
    "MAX_PHOTOS",
    "Config",
    "ErrorLog",
    # Taxonomy
    "Families",
    "Family",
    "Genera",
    "Genus",
    "GenusNotFoundError",
    "GenusRecord",
    "Taxa",
    "Taxon",
    # Photos
    "INatPhotoProvider",
    "InatPhoto",
    "PhotoCurator",
    "merge_photos",
    "read_photos",
    "write_photos",
    # Rare plants
    "get_rpi_rank_and_threat_descriptions",
]
