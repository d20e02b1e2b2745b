"""GenerationRequest validation — topic and style preconditions."""

import dataclasses

import pytest

from punchline.core.domain_types import JokeStyle
from punchline.core.errors import JokeValidationError
from punchline.core.generation_types import GenerationRequest, GenerationResult


def test_create_valid_request():
    req = GenerationRequest.create("  coffee ", "dad-joke", " food ")
    assert req.topic == "coffee"
    assert req.style is JokeStyle.DAD_JOKE
    assert req.category == "food"


@pytest.mark.parametrize("topic", [None, "", "   "])
def test_missing_topic_rejected(topic):
    with pytest.raises(JokeValidationError) as exc:
        GenerationRequest.create(topic, "pun")
    assert exc.value.field == "topic"
    assert exc.value.http_status == 400


@pytest.mark.parametrize("style", [None, "limerick", "PUN", ""])
def test_invalid_style_rejected(style):
    with pytest.raises(JokeValidationError) as exc:
        GenerationRequest.create("cats", style)
    assert exc.value.field == "style"


def test_blank_category_becomes_none():
    assert GenerationRequest.create("cats", "pun", "  ").category is None


def test_result_is_immutable():
    result = GenerationResult("joke", "m", 1, 0.0)
    with pytest.raises(dataclasses.FrozenInstanceError):
        result.text = "other"  # type: ignore[misc]
