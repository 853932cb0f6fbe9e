"""Integration tests for public API routes"""
import pytest


@pytest.fixture
def site(client):
    response = client.post(
        "/api/hu/admin/sites",
        json={"slug": "etyek-budai", "translations": [{"lang": "hu", "name": "Etyek-Budai borvidék"}]},
    )
    assert response.status_code == 201
    return response.json()


@pytest.fixture
def place(client, site):
    response = client.post(
        "/api/hu/admin/places",
        json={"site_id": site["id"], "translations": [{"lang": "hu", "name": "Kovács Pincészet"}]},
    )
    assert response.status_code == 201
    return response.json()


class TestHealth:

    @pytest.mark.integration
    def test_root(self, client):
        response = client.get("/")

        assert response.status_code == 200
        assert response.json()["name"] == "PlaceHub"

    @pytest.mark.integration
    def test_health(self, client):
        response = client.get("/health")

        assert response.status_code == 200
        assert response.json()["status"] in ("healthy", "degraded")


class TestResolveRoutes:
    """Tests for public slug resolution"""

    @pytest.mark.integration
    def test_canonical(self, client, place):
        response = client.get("/api/public/hu/etyek-budai/resolve/kovacs-pinceszet")

        assert response.status_code == 200
        body = response.json()
        assert body["entity_type"] == "place"
        assert body["entity_id"] == place["id"]
        assert body["needs_redirect"] is False

    @pytest.mark.integration
    def test_renamed_place_redirects(self, client, site, place):
        client.patch(
            f"/api/hu/admin/places/{place['id']}",
            params={"siteId": site["id"]},
            json={"translations": [{"lang": "hu", "name": "Kovács Borház"}]},
        )

        body = client.get("/api/public/hu/etyek-budai/resolve/kovacs-pinceszet").json()

        assert body["canonical"] == {"lang": "hu", "site_key": "etyek-budai", "slug": "kovacs-borhaz"}
        assert body["needs_redirect"] is True

    @pytest.mark.integration
    def test_unknown_slug(self, client, site):
        response = client.get("/api/public/hu/etyek-budai/resolve/nincs-ilyen")

        assert response.status_code == 404
        assert response.json()["error"]["code"] == "SLUG_001"

    @pytest.mark.integration
    def test_unknown_site_key(self, client, site):
        response = client.get("/api/public/hu/balaton/resolve/kovacs-pinceszet")

        assert response.status_code == 404
        assert response.json()["error"]["code"] == "SITE_002"


class TestPublicLegalRoutes:
    """Tests for public legal pages"""

    @pytest.mark.integration
    def test_page_with_fallback(self, client, site):
        created = client.post(
            "/api/hu/admin/legal",
            json={
                "site_id": site["id"],
                "key": "privacy",
                "translations": [{"lang": "hu", "title": "Adatvédelem", "content": "<p>Első. Második. Harmadik.</p>"}],
            },
        )
        assert created.status_code == 201

        response = client.get("/api/public/en/etyek-budai/legal/privacy")

        assert response.status_code == 200
        body = response.json()
        assert body["title"] == "Adatvédelem"
        assert body["seo"]["description"] == "Első. Második."

    @pytest.mark.integration
    def test_invalid_page(self, client, site):
        response = client.get("/api/public/hu/etyek-budai/legal/cookies")

        assert response.status_code == 400
        assert response.json()["error"]["code"] == "LEGAL_001"


class TestPublicFloorplanRoutes:

    @pytest.mark.integration
    def test_not_entitled_is_empty(self, client, place):
        response = client.get(f"/api/public/hu/etyek-budai/floorplans/{place['id']}")

        assert response.status_code == 200
        assert response.json() == []

    @pytest.mark.integration
    def test_upload_requires_subscription(self, client, place):
        response = client.post(
            "/api/hu/admin/floorplans",
            json={"place_id": place["id"], "image_url": "/uploads/fp.png"},
        )

        assert response.status_code == 400
        assert response.json()["error"]["code"] == "FLOORPLAN_002"

    @pytest.mark.integration
    def test_entitled_place_shows_floorplan_with_pins(self, client, site, place):
        client.post(
            "/api/hu/admin/feature-subscriptions",
            json={
                "site_id": site["id"],
                "scope": "place",
                "place_id": place["id"],
                "plan_key": "FP_1",
                "billing_period": "MONTHLY",
            },
        )
        floorplan = client.post(
            "/api/hu/admin/floorplans",
            json={"place_id": place["id"], "image_url": "/uploads/fp.png", "is_primary": True},
        ).json()
        client.post("/api/hu/admin/floorplan-pins", json={"floorplan_id": floorplan["id"], "x": 0.25, "y": 0.75})

        response = client.get(f"/api/public/hu/etyek-budai/floorplans/{place['id']}")

        assert response.status_code == 200
        floorplans = response.json()
        assert len(floorplans) == 1
        assert floorplans[0]["pins"][0]["x"] == 0.25


class TestPublicCollectionRoutes:

    @pytest.mark.integration
    def test_collection_view(self, client, site):
        collection = client.post(
            "/api/hu/admin/collections",
            json={
                "slug": "borutak",
                "is_active": True,
                "translations": [{"lang": "hu", "title": "Borutak"}],
            },
        ).json()
        client.post(f"/api/hu/admin/collections/{collection['id']}/items", json={"site_id": site["id"]})

        response = client.get("/api/public/en/collections/borutak")

        assert response.status_code == 200
        body = response.json()
        assert body["title"] == "Borutak"
        assert [item["title"] for item in body["items"]] == ["Etyek-Budai borvidék"]

    @pytest.mark.integration
    def test_inactive_collection(self, client):
        client.post("/api/hu/admin/collections", json={"slug": "rejtett", "translations": []})

        response = client.get("/api/public/hu/collections/rejtett")

        assert response.status_code == 404
        assert response.json()["error"]["code"] == "COLLECTION_001"
