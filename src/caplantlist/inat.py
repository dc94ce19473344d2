"""iNaturalist photo provider.

Taxon photos are looked up through the iNaturalist API by taxon ID:

    GET https://api.inaturalist.org/v1/taxa/47602,53410

Each result lists the taxon's curated photos (``taxon_photos``) in the order
iNaturalist shows them.
"""

from __future__ import annotations

import time
from pathlib import PurePosixPath
from typing import TYPE_CHECKING
from urllib.parse import urlparse

import requests

from caplantlist.photos import InatPhoto

if TYPE_CHECKING:
    from caplantlist.taxon import Taxon


INAT_API_URL = "https://api.inaturalist.org/v1"

# The taxa endpoint accepts at most 30 IDs per request
MAX_IDS_PER_REQUEST = 30

USER_AGENT = "ca-plant-list/0.1 (https://github.com/ca-plant-list/ca-plant-list)"


def photo_from_api(photo: dict) -> InatPhoto | None:
    """Build an InatPhoto from an API photo record.

    Photos without a license (all rights reserved) are not usable and
    return None.
    """
    license_code = photo.get("license_code")
    if not license_code:
        return None

    url = photo.get("url") or ""
    ext = PurePosixPath(urlparse(url).path).suffix.lstrip(".")

    return InatPhoto(
        id=str(photo["id"]),
        ext=ext or "jpg",
        license_code=license_code,
        attr_name=photo.get("attribution_name") or "",
    )


class INatPhotoProvider:
    """Fetches candidate photos for taxa from iNaturalist.

    Example:
        >>> provider = INatPhotoProvider()
        >>> photos = provider.get_taxon_photos(taxa.get_taxon_list())
        >>> photos["Arctostaphylos glauca"][0].get_url()
    """

    def __init__(
        self,
        session: requests.Session | None = None,
        *,
        base_url: str = INAT_API_URL,
        timeout: float = 60,
        delay: float = 1.0,
    ) -> None:
        """Initialize the provider.

        Args:
            session: HTTP session to use; a new one is created if omitted.
            base_url: API root.
            timeout: Request timeout in seconds.
            delay: Pause between batch requests, in seconds.
        """
        if session is None:
            session = requests.Session()
            session.headers.update({"User-Agent": USER_AGENT, "Accept": "application/json"})
        self.session = session
        self.base_url = base_url
        self.timeout = timeout
        self.delay = delay

    def get_taxon_photos(self, taxa: list[Taxon]) -> dict[str, list[InatPhoto]]:
        """Fetch photos for the given taxa.

        Taxa without an iNaturalist ID are skipped. Taxa sharing an ID each
        get the photos for that ID. Requests are made one batch at a time;
        HTTP errors are raised.

        Returns:
            Candidate photos keyed by taxon name.
        """
        names_by_id: dict[str, list[str]] = {}
        for taxon in taxa:
            if taxon.inat_id:
                names_by_id.setdefault(taxon.inat_id, []).append(taxon.name)
        ids = list(names_by_id)

        taxon_photos: dict[str, list[InatPhoto]] = {}
        for start in range(0, len(ids), MAX_IDS_PER_REQUEST):
            if start and self.delay:
                time.sleep(self.delay)

            batch = ids[start:start + MAX_IDS_PER_REQUEST]
            print(f"  Fetching photos for {len(batch)} taxa ({start + len(batch)}/{len(ids)})...")
            response = self.session.get(
                f"{self.base_url}/taxa/{','.join(batch)}",
                timeout=self.timeout,
            )
            response.raise_for_status()

            for result in response.json().get("results", []):
                names = names_by_id.get(str(result.get("id")), [])
                if not names:
                    continue
                photos = []
                for taxon_photo in result.get("taxon_photos", []):
                    photo = photo_from_api(taxon_photo.get("photo", {}))
                    if photo is not None:
                        photos.append(photo)
                for name in names:
                    taxon_photos[name] = list(photos)

        return taxon_photos
