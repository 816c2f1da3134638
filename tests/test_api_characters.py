"""
Tests for the /characters endpoints.
"""

import pytest

USER = {"X-User-Id": "user-1"}
OTHER = {"X-User-Id": "user-2"}


@pytest.fixture
def lucia(api_client):
    response = api_client.post(
        "/characters",
        json={"name": "Lucia", "category": "child", "age": 7, "likes": "Dragons"},
        headers=USER,
    )
    assert response.status_code == 201
    return response.json()


class TestCharacters:

    def test_create(self, lucia):
        assert lucia["character_id"]
        assert lucia["owner_id"] == "user-1"
        assert lucia["category"] == "child"
        assert lucia["age"] == 7
        assert lucia["likes"] == "Dragons"

    def test_age_dropped_for_pets(self, api_client):
        response = api_client.post(
            "/characters", json={"name": "Rex", "category": "pet", "age": 3}, headers=USER
        )
        assert response.status_code == 201
        assert response.json()["age"] is None

    def test_short_name_rejected(self, api_client):
        response = api_client.post("/characters", json={"name": "R"}, headers=USER)
        assert response.status_code == 422

    def test_unknown_category_rejected(self, api_client):
        response = api_client.post(
            "/characters", json={"name": "Rex", "category": "dinosaur"}, headers=USER
        )
        assert response.status_code == 422

    def test_list_only_own_characters(self, api_client, lucia):
        api_client.post("/characters", json={"name": "Other"}, headers=OTHER)

        data = api_client.get("/characters", headers=USER).json()
        assert data["total"] == 1
        assert data["characters"][0]["name"] == "Lucia"

    def test_requires_user(self, api_client):
        assert api_client.get("/characters").status_code == 401

    def test_get_foreign_character_forbidden(self, api_client, lucia):
        response = api_client.get(f"/characters/{lucia['character_id']}", headers=OTHER)
        assert response.status_code == 403

    def test_get_unknown_character(self, api_client):
        assert api_client.get("/characters/missing", headers=USER).status_code == 404

    def test_update(self, api_client, lucia):
        response = api_client.patch(
            f"/characters/{lucia['character_id']}",
            json={"personality": "Curious"},
            headers=USER,
        )
        data = response.json()
        assert response.status_code == 200
        assert data["personality"] == "Curious"
        assert data["name"] == "Lucia"
        assert data["age"] == 7

    def test_update_to_toy_clears_age(self, api_client, lucia):
        response = api_client.patch(
            f"/characters/{lucia['character_id']}", json={"category": "toy"}, headers=USER
        )
        assert response.json()["category"] == "toy"
        assert response.json()["age"] is None

    def test_update_foreign_character_forbidden(self, api_client, lucia):
        response = api_client.patch(
            f"/characters/{lucia['character_id']}", json={"name": "Hacked"}, headers=OTHER
        )
        assert response.status_code == 403
