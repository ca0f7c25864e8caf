"""Tests for Firestore-backed recipe and profile storage."""

import pytest

from masterchef.models.recipe import SCHEMA_VERSION
from masterchef.services.user_profiles import username_from_email
from masterchef.utils.exceptions import NotAuthenticated, NotFound

from conftest import SAMPLE_RECIPE


def test_create_writes_defaults(recipe_store, fake_db):
    recipe_id = recipe_store.create("u1", SAMPLE_RECIPE, ["chicken", "garlic"])

    stored = fake_db.collection("recipes").docs[recipe_id]
    assert stored["userId"] == "u1"
    assert stored["recipeTitle"] == "Lemon Garlic Chicken"
    assert stored["recipeContent"] == SAMPLE_RECIPE
    assert stored["ingredientsList"] == ["chicken", "garlic"]
    assert stored["isFavorite"] is False
    assert stored["userNotes"] == ""
    assert stored["schemaVersion"] == SCHEMA_VERSION
    assert stored["createdAt"] is not None


def test_create_without_heading_is_untitled(recipe_store):
    recipe_id = recipe_store.create("u1", "## Just a subhead\nbody", [])
    assert recipe_store.get("u1", recipe_id).recipeTitle == "Untitled Recipe"


def test_create_requires_owner(recipe_store, fake_db):
    with pytest.raises(NotAuthenticated, match="User must be logged in to save recipes"):
        recipe_store.create(None, SAMPLE_RECIPE, [])
    assert fake_db.collection("recipes").docs == {}


def test_list_newest_first_and_owner_scoped(recipe_store):
    first = recipe_store.create("u1", "# One", [])
    second = recipe_store.create("u1", "# Two", [])
    recipe_store.create("u2", "# Other", [])

    recipes = recipe_store.list_by_owner("u1")

    assert [r.id for r in recipes] == [second, first]
    assert all(r.userId == "u1" for r in recipes)
    assert recipe_store.list_by_owner("nobody") == []


def test_get_other_owner_is_not_found(recipe_store):
    recipe_id = recipe_store.create("u1", "# Mine", [])
    with pytest.raises(NotFound):
        recipe_store.get("u2", recipe_id)


def test_set_favorite_is_idempotent(recipe_store):
    recipe_id = recipe_store.create("u1", "# Fav", [])

    recipe_store.set_favorite("u1", recipe_id, True)
    recipe_store.set_favorite("u1", recipe_id, True)

    assert recipe_store.get("u1", recipe_id).isFavorite is True

    recipe_store.set_favorite("u1", recipe_id, False)
    assert recipe_store.get("u1", recipe_id).isFavorite is False


def test_set_notes_and_clear(recipe_store):
    recipe_id = recipe_store.create("u1", "# Notes", [])

    recipe_store.set_notes("u1", recipe_id, "less salt")
    assert recipe_store.get("u1", recipe_id).userNotes == "less salt"

    recipe_store.set_notes("u1", recipe_id, "")
    assert recipe_store.get("u1", recipe_id).userNotes == ""


def test_updates_on_missing_or_foreign_recipe(recipe_store, fake_db):
    recipe_id = recipe_store.create("u1", "# Guarded", [])

    with pytest.raises(NotFound):
        recipe_store.set_favorite("u1", "missing", True)
    with pytest.raises(NotFound):
        recipe_store.set_notes("u2", recipe_id, "hijack")

    assert fake_db.collection("recipes").docs[recipe_id]["userNotes"] == ""


def test_delete_twice_is_fine(recipe_store):
    recipe_id = recipe_store.create("u1", "# Gone", [])

    recipe_store.delete("u1", recipe_id)
    recipe_store.delete("u1", recipe_id)

    assert recipe_store.list_by_owner("u1") == []


def test_delete_foreign_recipe_leaves_it(recipe_store):
    recipe_id = recipe_store.create("u1", "# Keep", [])
    recipe_store.delete("u2", recipe_id)
    assert recipe_store.get("u1", recipe_id).recipeTitle == "Keep"


def test_username_from_email():
    assert username_from_email("chef@example.com") == "chef"
    assert username_from_email(None) == ""


def test_profile_create_once(profile_store):
    profile, created = profile_store.create("u1", "chef@example.com")
    assert created is True
    assert profile.username == "chef"
    assert profile.userEmail == "chef@example.com"

    again, created_again = profile_store.create("u1", "different@example.com")
    assert created_again is False
    assert again.userEmail == "chef@example.com"
    assert again.createdAt == profile.createdAt


def test_profile_get_missing(profile_store):
    with pytest.raises(NotFound):
        profile_store.get("u1")


@pytest.mark.parametrize("bad_id", ["__reserved__", "nested/path"])
def test_ids_firestore_refuses_count_as_absent(recipe_store, bad_id):
    recipe_store.create("u1", "# Keep", [])

    recipe_store.delete("u1", bad_id)
    with pytest.raises(NotFound):
        recipe_store.set_favorite("u1", bad_id, True)
    with pytest.raises(NotFound):
        recipe_store.get("u1", bad_id)

    assert len(recipe_store.list_by_owner("u1")) == 1
