"""Tests for service modules."""

import asyncio
import json
import logging
from types import SimpleNamespace

import pytest

from masterchef.core.request_id import RequestIdLogFilter, set_request_id
from masterchef.services.gemini_service import GeminiService
from masterchef.services.recipe_generator import SYSTEM_PROMPT, RecipeGenerator, build_user_message
from masterchef.utils.exceptions import (
    InvalidRequest,
    MasterChefException,
    NotAuthenticated,
    NotFound,
    Unconfigured,
    UpstreamFailure,
    exception_for_kind,
)
from masterchef.utils.logging_config import CloudRunJSONFormatter
from masterchef.utils.markdown import UNTITLED_RECIPE, extract_title, recipe_preview
from masterchef.utils.validators import (
    validate_dietary_preferences,
    validate_ingredient_name,
    validate_ingredients,
    validate_owner_id,
)

from conftest import FakeGemini


def test_validate_ingredients_valid():
    assert validate_ingredients(["chicken", " rice ", "", "vegetables"]) == ["chicken", "rice", "vegetables"]


def test_validate_ingredients_comma_string():
    assert validate_ingredients("a, b ,c") == ["a", "b", "c"]


@pytest.mark.parametrize("value", [None, [], "", ",  ,"])
def test_validate_ingredients_empty(value):
    with pytest.raises(InvalidRequest, match="Valid list of ingredients is required"):
        validate_ingredients(value)


def test_validate_ingredients_not_strings():
    with pytest.raises(InvalidRequest):
        validate_ingredients(["egg", 3])


def test_validate_ingredients_too_many():
    with pytest.raises(InvalidRequest):
        validate_ingredients([f"item{i}" for i in range(51)])


def test_validate_dietary_preferences():
    assert validate_dietary_preferences(None) == []
    assert validate_dietary_preferences([" vegan ", "", "  "]) == ["vegan"]


def test_validate_ingredient_name():
    assert validate_ingredient_name("sun-dried tomatoes") is None
    assert validate_ingredient_name("") == "Please enter an ingredient"
    assert validate_ingredient_name("eggs2") == "Please enter a valid ingredient (letters, spaces, and hyphens only)"


def test_validate_owner_id():
    assert validate_owner_id("u1") == "u1"
    with pytest.raises(NotAuthenticated):
        validate_owner_id("")
    with pytest.raises(NotAuthenticated):
        validate_owner_id(None)


@pytest.mark.parametrize(
    "text, expected",
    [
        ("# Pasta Primavera\n\n## Ingredients", "Pasta Primavera"),
        ("Intro line\n#   Spiced Lentils  \nmore", "Spiced Lentils"),
        ("## Subhead only\nbody", UNTITLED_RECIPE),
        ("#NoSpace\nbody", UNTITLED_RECIPE),
        ("# First\n# Second", "First"),
        ("", UNTITLED_RECIPE),
        (None, UNTITLED_RECIPE),
    ],
)
def test_extract_title(text, expected):
    assert extract_title(text) == expected


def test_recipe_preview_strips_markdown():
    text = "# Soup\n\n**Warm** and *easy*\n- carrots\n- more lines here"
    assert recipe_preview(text) == "Soup Warm and easy - carrots"


def test_recipe_preview_truncates():
    text = "# " + "x" * 200
    preview = recipe_preview(text, length=20)
    assert preview == "x" * 20 + "..."


def test_recipe_preview_empty():
    assert recipe_preview("") == "No preview available"


def test_exception_for_kind():
    assert isinstance(exception_for_kind("not_found", "gone"), NotFound)
    assert exception_for_kind("generation_failed", "x").retryable is True
    unknown = exception_for_kind("something_new", "boom")
    assert type(unknown) is MasterChefException
    assert unknown.message == "boom"


def test_build_user_message():
    assert build_user_message(["a", "b"]) == "I have a, b. Please give me a recipe you'd recommend I make!"
    assert build_user_message(["a"], ["vegan", "nut-free"]).endswith(" Dietary preferences: vegan, nut-free.")


@pytest.mark.asyncio
async def test_recipe_generator_single_call():
    gemini = FakeGemini(reply="# Toast")
    generator = RecipeGenerator(gemini_service=gemini)

    assert await generator.generate(["bread"]) == "# Toast"
    assert len(gemini.calls) == 1
    assert gemini.calls[0]["system_instruction"] == SYSTEM_PROMPT


@pytest.mark.asyncio
async def test_recipe_generator_wraps_unexpected_errors():
    generator = RecipeGenerator(gemini_service=FakeGemini(error=KeyError("candidates")))
    with pytest.raises(UpstreamFailure):
        await generator.generate(["bread"])


# ---------------------------------------------------------------------------
# GeminiService against a stand-in genai client
# ---------------------------------------------------------------------------

class StubModels:
    def __init__(self, response=None, delay=0.0, error=None):
        self.response = response
        self.delay = delay
        self.error = error
        self.calls = []

    async def generate_content(self, *, model, contents, config):
        self.calls.append({"model": model, "contents": contents, "config": config})
        if self.delay:
            await asyncio.sleep(self.delay)
        if self.error is not None:
            raise self.error
        return self.response


def service_with(models, **kwargs):
    service = GeminiService(api_key="test-gemini-key", **kwargs)
    service._client = SimpleNamespace(aio=SimpleNamespace(models=models))
    return service


@pytest.mark.asyncio
async def test_gemini_service_returns_text_verbatim():
    models = StubModels(response=SimpleNamespace(text="# Stew\n\n  body  \n"))
    service = service_with(models, model="gemini-test", max_output_tokens=512, temperature=0.2)

    text = await service.generate_text(system_instruction="be brief", user_message="I have beans.")

    assert text == "# Stew\n\n  body  \n"
    assert len(models.calls) == 1
    call = models.calls[0]
    assert call["model"] == "gemini-test"
    assert call["contents"] == "I have beans."
    assert call["config"].system_instruction == "be brief"
    assert call["config"].max_output_tokens == 512
    assert call["config"].temperature == 0.2


@pytest.mark.asyncio
async def test_gemini_service_unconfigured_makes_no_call():
    service = GeminiService(api_key="")
    assert service.is_configured is False
    with pytest.raises(Unconfigured):
        await service.generate_text(system_instruction="x", user_message="y")
    assert service._client is None


@pytest.mark.asyncio
async def test_gemini_service_timeout():
    models = StubModels(response=SimpleNamespace(text="late"), delay=1.0)
    service = service_with(models, timeout=0.01)
    with pytest.raises(UpstreamFailure):
        await service.generate_text(system_instruction="x", user_message="y")
    assert len(models.calls) == 1


@pytest.mark.asyncio
async def test_gemini_service_api_error():
    service = service_with(StubModels(error=RuntimeError("503 UNAVAILABLE")))
    with pytest.raises(UpstreamFailure):
        await service.generate_text(system_instruction="x", user_message="y")


@pytest.mark.asyncio
@pytest.mark.parametrize("text", [None, "", "   \n"])
async def test_gemini_service_empty_text(text):
    response = SimpleNamespace(text=text, candidates=[SimpleNamespace(finish_reason="SAFETY")])
    service = service_with(StubModels(response=response))
    with pytest.raises(UpstreamFailure, match="empty response"):
        await service.generate_text(system_instruction="x", user_message="y")


def test_json_log_line_carries_request_id_and_extra():
    set_request_id("req-42")
    record = logging.LogRecord("masterchef.test", logging.INFO, __file__, 1, "Saved %s", ("r1",), None)
    record.recipe_title = "Soup"
    RequestIdLogFilter().filter(record)

    entry = json.loads(CloudRunJSONFormatter().format(record))

    assert entry["severity"] == "INFO"
    assert entry["message"] == "Saved r1"
    assert entry["request_id"] == "req-42"
    assert entry["recipe_title"] == "Soup"
    assert "lineno" not in entry
    set_request_id("")
