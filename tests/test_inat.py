"""Tests for the iNaturalist photo provider, using a fake HTTP session."""

import pytest
import requests

from caplantlist.inat import MAX_IDS_PER_REQUEST, INatPhotoProvider, photo_from_api
from caplantlist.photos import InatPhoto


class FakeResponse:
    def __init__(self, payload, status_code=200):
        self.payload = payload
        self.status_code = status_code

    def raise_for_status(self):
        if self.status_code >= 400:
            raise requests.HTTPError(f"{self.status_code} error")

    def json(self):
        return self.payload


class FakeSession:
    def __init__(self, responses):
        self.responses = list(responses)
        self.urls = []

    def get(self, url, timeout=None):
        self.urls.append(url)
        return self.responses.pop(0)


def api_photo(photo_id, license_code="cc-by", url=None, attribution_name="Jane Doe"):
    return {
        "photo": {
            "id": photo_id,
            "license_code": license_code,
            "url": url or f"https://inaturalist-open-data.s3.amazonaws.com/photos/{photo_id}/square.jpg",
            "attribution_name": attribution_name,
        }
    }


class TestPhotoFromApi:
    def test_fields(self):
        photo = photo_from_api(api_photo(
            123, url="https://inaturalist-open-data.s3.amazonaws.com/photos/123/square.jpeg")["photo"])
        assert photo == InatPhoto(id="123", ext="jpeg", license_code="cc-by", attr_name="Jane Doe")

    def test_unlicensed_skipped(self):
        assert photo_from_api(api_photo(1, license_code=None)["photo"]) is None


class TestINatPhotoProvider:
    def test_single_request(self, taxa):
        session = FakeSession([FakeResponse({"results": [
            {"id": 47602, "taxon_photos": [api_photo(4), api_photo(5, license_code=None), api_photo(6)]},
            {"id": 53410, "taxon_photos": []},
        ]})])
        provider = INatPhotoProvider(session, delay=0)
        targets = [taxa.get_taxon("Arctostaphylos glauca"), taxa.get_taxon("Arctostaphylos manzanita")]

        photos = provider.get_taxon_photos(targets)

        assert session.urls == ["https://api.inaturalist.org/v1/taxa/47602,53410"]
        assert [p.id for p in photos["Arctostaphylos glauca"]] == ["4", "6"]
        assert photos["Arctostaphylos manzanita"] == []

    def test_taxa_without_inat_id_skipped(self, taxa):
        session = FakeSession([])
        provider = INatPhotoProvider(session, delay=0)
        assert provider.get_taxon_photos([taxa.get_taxon("Adiantum jordanii")]) == {}
        assert session.urls == []

    def test_batches(self):
        class Stub:
            def __init__(self, i):
                self.name = f"Taxon {i}"
                self.inat_id = str(i)

        stubs = [Stub(i) for i in range(MAX_IDS_PER_REQUEST + 5)]
        session = FakeSession([FakeResponse({"results": []}), FakeResponse({"results": []})])
        INatPhotoProvider(session, delay=0).get_taxon_photos(stubs)
        assert len(session.urls) == 2
        assert session.urls[1].endswith("/taxa/" + ",".join(str(i) for i in range(30, 35)))

    def test_http_error_propagates(self, taxa):
        session = FakeSession([FakeResponse({}, status_code=503)])
        with pytest.raises(requests.HTTPError):
            INatPhotoProvider(session, delay=0).get_taxon_photos([taxa.get_taxon("Pinus radiata")])

    def test_shared_inat_id(self):
        class Stub:
            def __init__(self, name, inat_id):
                self.name = name
                self.inat_id = inat_id

        session = FakeSession([FakeResponse({"results": [
            {"id": 47602, "taxon_photos": [api_photo(4), api_photo(5)]},
        ]})])
        photos = INatPhotoProvider(session, delay=0).get_taxon_photos([
            Stub("Arctostaphylos glauca", "47602"),
            Stub("Arctostaphylos glauca subsp. old", "47602"),
        ])
        assert session.urls == ["https://api.inaturalist.org/v1/taxa/47602"]
        assert [p.id for p in photos["Arctostaphylos glauca"]] == ["4", "5"]
        assert [p.id for p in photos["Arctostaphylos glauca subsp. old"]] == ["4", "5"]
