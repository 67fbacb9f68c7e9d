import json

import pytest

from barberapp.seeds import DEFAULT_AMENITIES, seed_amenities
from barberapp.services import get_services
from tests.helpers import post_json


def data_of(response):
    return json.loads(response.data)["data"]


@pytest.mark.amenity
class TestAmenityCatalogue:
    """Test suite for public amenity reads."""

    def test_list_is_public_and_sorted(self, client, make_amenity):
        make_amenity("Parking", "car-outline")
        make_amenity("Air Conditioning", "air-conditioner")

        response = client.get("/api/amenities")
        assert response.status_code == 200
        assert [a["name"] for a in data_of(response)] == ["Air Conditioning", "Parking"]

    def test_search(self, client, make_amenity):
        make_amenity("Wi-Fi", "wifi")
        make_amenity("Parking", "car-outline")

        names = [a["name"] for a in data_of(client.get("/api/amenities?search=WI"))]
        assert names == ["Wi-Fi"]

    def test_get_by_id(self, client, amenity):
        assert data_of(client.get(f"/api/amenities/{amenity['id']}")) == amenity

    def test_get_unknown(self, client):
        response = client.get("/api/amenities/0b8e7f4c-2a7b-4c3e-9d5f-1a2b3c4d5e6f")
        assert response.status_code == 404
        assert json.loads(response.data)["error"] == "Amenity not found"

    def test_limit_out_of_range(self, client):
        assert client.get("/api/amenities?popular=true&limit=0").status_code == 400
        assert client.get("/api/amenities?popular=true&limit=101").status_code == 400

    def test_popular_ranking(self, client, make_amenity, make_barbershop, barber):
        wifi = make_amenity("Wi-Fi", "wifi")
        parking = make_amenity("Parking", "car-outline")
        make_amenity("Credit Card", "credit-card-outline")

        make_barbershop(barber, name="One", amenityIds=[wifi["id"], parking["id"]])
        make_barbershop(barber, name="Two", amenityIds=[wifi["id"]])

        ranked = data_of(client.get("/api/amenities?popular=true&limit=10"))
        assert [(a["name"], a["usageCount"]) for a in ranked] == [
            ("Wi-Fi", 2),
            ("Parking", 1),
            ("Credit Card", 0),
        ]

        top = data_of(client.get("/api/amenities?popular=true&limit=1"))
        assert [a["name"] for a in top] == ["Wi-Fi"]

    def test_popular_ties_break_by_name(self, client, make_amenity):
        make_amenity("Zebra Stripes", "z")
        make_amenity("Beard Oil", "b")

        ranked = data_of(client.get("/api/amenities?popular=true"))
        assert [a["name"] for a in ranked] == ["Beard Oil", "Zebra Stripes"]

    def test_by_barbershops_includes_empty(self, client, make_barbershop, barber, amenity):
        with_amenity = make_barbershop(barber, name="Has", amenityIds=[amenity["id"]])
        without = make_barbershop(barber, name="Hasnt")

        response = post_json(
            client,
            "/api/amenities/by-barbershops",
            {"barbershopIds": [with_amenity["id"], without["id"]]},
        )
        assert response.status_code == 200
        assert data_of(response) == {with_amenity["id"]: [amenity], without["id"]: []}

    def test_by_barbershops_validates_ids(self, client):
        response = post_json(client, "/api/amenities/by-barbershops", {"barbershopIds": ["nope"]})
        assert response.status_code == 400

        response = post_json(client, "/api/amenities/by-barbershops", {"barbershopIds": []})
        assert response.status_code == 400


@pytest.mark.amenity
class TestAmenityAdmin:
    """Test suite for admin-only amenity management."""

    def test_create_requires_admin(self, client, barber):
        body = {"name": "Coffee", "icon": "coffee"}
        assert post_json(client, "/api/amenities", body).status_code == 401
        assert post_json(client, "/api/amenities", body, headers=barber["headers"]).status_code == 403

    def test_create_and_duplicate(self, client, admin):
        body = {"name": "Coffee", "icon": "coffee"}
        response = post_json(client, "/api/amenities", body, headers=admin["headers"])
        assert response.status_code == 201
        assert data_of(response)["name"] == "Coffee"

        response = post_json(client, "/api/amenities", body, headers=admin["headers"])
        assert response.status_code == 409
        assert json.loads(response.data)["error"] == "Amenity with this name already exists"

    def test_update(self, client, admin, amenity, make_amenity):
        make_amenity("Parking", "car-outline")
        url = f"/api/amenities/{amenity['id']}"

        response = post_json(client, url, {"icon": "wifi-strong"}, headers=admin["headers"], method="put")
        assert data_of(response) == {**amenity, "icon": "wifi-strong"}

        response = post_json(client, url, {"name": "Parking"}, headers=admin["headers"], method="put")
        assert response.status_code == 409

    def test_delete_blocked_while_attached(self, client, admin, barber, amenity, make_barbershop):
        shop = make_barbershop(barber, amenityIds=[amenity["id"]])
        url = f"/api/amenities/{amenity['id']}"

        response = client.delete(url, headers=admin["headers"])
        assert response.status_code == 409
        assert (
            json.loads(response.data)["error"]
            == "Cannot delete amenity that is associated with barbershops"
        )

        client.delete(f"/api/barbershops/{shop['id']}/amenities/{amenity['id']}", headers=barber["headers"])
        assert client.delete(url, headers=admin["headers"]).status_code == 200
        assert client.get(url).status_code == 404

    def test_delete_unknown(self, client, admin):
        response = client.delete(
            "/api/amenities/0b8e7f4c-2a7b-4c3e-9d5f-1a2b3c4d5e6f", headers=admin["headers"]
        )
        assert response.status_code == 404


@pytest.mark.amenity
def test_seed_amenities_runs_once(app, client):
    with app.app_context():
        assert seed_amenities() == len(DEFAULT_AMENITIES)
        assert seed_amenities() == 0

    names = {a["name"] for a in data_of(client.get("/api/amenities"))}
    assert names == {data["name"] for data in DEFAULT_AMENITIES}


@pytest.mark.amenity
def test_service_lookups(app, make_amenity):
    wifi = make_amenity("Wi-Fi", "wifi")
    parking = make_amenity("Parking", "car-outline")

    with app.app_context():
        service = get_services().amenities
        found = service.find_by_ids([wifi["id"], parking["id"], "0b8e7f4c-2a7b-4c3e-9d5f-1a2b3c4d5e6f"])
        assert sorted(a.name for a in found) == ["Parking", "Wi-Fi"]
        assert service.find_by_ids([]) == []
        assert service.find_by_name("Wi-Fi").id == wifi["id"]
        # names match exactly
        assert service.find_by_name("wi-fi") is None
