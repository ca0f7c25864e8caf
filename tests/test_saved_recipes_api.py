"""Tests for saved recipe and profile endpoints."""

import pytest
from fastapi.testclient import TestClient

from conftest import SAMPLE_RECIPE, auth_headers


def save(client: TestClient, uid="chef", recipe=SAMPLE_RECIPE, ingredients=("chicken", "garlic")):
    return client.post(
        "/api/recipes/saved",
        json={"recipe": recipe, "ingredients": list(ingredients)},
        headers=auth_headers(uid),
    )


@pytest.mark.parametrize(
    "method, path",
    [
        ("get", "/api/recipes/saved"),
        ("post", "/api/recipes/saved"),
        ("get", "/api/recipes/saved/abc"),
        ("put", "/api/recipes/saved/abc/favorite"),
        ("put", "/api/recipes/saved/abc/notes"),
        ("delete", "/api/recipes/saved/abc"),
        ("post", "/api/users/profile"),
        ("get", "/api/users/profile"),
    ],
)
def test_requires_authentication(client: TestClient, method, path):
    response = client.request(method.upper(), path)
    assert response.status_code == 401
    assert response.json()["error"] == "not_authenticated"


def test_rejects_invalid_token(client: TestClient):
    response = client.get("/api/recipes/saved", headers={"Authorization": "Bearer forged"})
    assert response.status_code == 401


def test_save_returns_id_and_title(client: TestClient):
    response = save(client)

    assert response.status_code == 201
    data = response.json()
    assert data["title"] == "Lemon Garlic Chicken"
    assert data["id"]


def test_save_rejects_blank_recipe(client: TestClient):
    response = save(client, recipe="   ")
    assert response.status_code == 400
    assert response.json()["error"] == "invalid_request"


def test_list_and_get(client: TestClient):
    first = save(client, recipe="# First").json()["id"]
    second = save(client, recipe="# Second").json()["id"]
    save(client, uid="someone-else", recipe="# Theirs")

    response = client.get("/api/recipes/saved", headers=auth_headers("chef"))
    assert response.status_code == 200
    assert [r["id"] for r in response.json()] == [second, first]

    detail = client.get(f"/api/recipes/saved/{first}", headers=auth_headers("chef")).json()
    assert detail["recipeTitle"] == "First"
    assert detail["ingredientsList"] == ["chicken", "garlic"]
    assert detail["isFavorite"] is False
    assert detail["userNotes"] == ""


def test_other_users_recipe_is_not_found(client: TestClient):
    recipe_id = save(client).json()["id"]

    response = client.get(f"/api/recipes/saved/{recipe_id}", headers=auth_headers("intruder"))
    assert response.status_code == 404
    assert response.json()["error"] == "not_found"

    response = client.put(
        f"/api/recipes/saved/{recipe_id}/favorite", json={"isFavorite": True}, headers=auth_headers("intruder")
    )
    assert response.status_code == 404


def test_favorite_and_notes(client: TestClient):
    recipe_id = save(client).json()["id"]
    headers = auth_headers("chef")

    assert client.put(f"/api/recipes/saved/{recipe_id}/favorite", json={"isFavorite": True}, headers=headers).status_code == 204
    assert client.put(f"/api/recipes/saved/{recipe_id}/notes", json={"notes": "double garlic"}, headers=headers).status_code == 204

    detail = client.get(f"/api/recipes/saved/{recipe_id}", headers=headers).json()
    assert detail["isFavorite"] is True
    assert detail["userNotes"] == "double garlic"


def test_favorite_requires_boolean(client: TestClient):
    recipe_id = save(client).json()["id"]
    response = client.put(
        f"/api/recipes/saved/{recipe_id}/favorite", json={}, headers=auth_headers("chef")
    )
    assert response.status_code == 400


def test_delete_is_idempotent(client: TestClient):
    recipe_id = save(client).json()["id"]
    headers = auth_headers("chef")

    assert client.delete(f"/api/recipes/saved/{recipe_id}", headers=headers).status_code == 204
    assert client.delete(f"/api/recipes/saved/{recipe_id}", headers=headers).status_code == 204
    assert client.get("/api/recipes/saved", headers=headers).json() == []


def test_profile_create_once(client: TestClient):
    headers = auth_headers("chef")

    created = client.post("/api/users/profile", headers=headers)
    assert created.status_code == 201
    profile = created.json()
    assert profile["userId"] == "chef"
    assert profile["userEmail"] == "chef@example.com"
    assert profile["username"] == "chef"

    again = client.post("/api/users/profile", headers=headers)
    assert again.status_code == 200
    assert again.json() == profile

    assert client.get("/api/users/profile", headers=headers).json() == profile


def test_profile_missing(client: TestClient):
    response = client.get("/api/users/profile", headers=auth_headers("newcomer"))
    assert response.status_code == 404


def test_reserved_document_id(client: TestClient):
    headers = auth_headers("chef")
    assert client.delete("/api/recipes/saved/__reserved__", headers=headers).status_code == 204
    response = client.put("/api/recipes/saved/__reserved__/notes", json={"notes": "x"}, headers=headers)
    assert response.status_code == 404
