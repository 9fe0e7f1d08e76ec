# unit_tests/test_flows.py
"""
Unit Tests for the NutriSnap flows
==================================
Run with: python -m pytest unit_tests/test_flows.py -v
"""

import asyncio
import json
import math

import pytest

from fakes import json_reply, tool_call, tool_reply
from nutrisnap_core.config import Settings
from nutrisnap_core.errors import SchemaViolation
from nutrisnap_core.flows import NutriSnap
from nutrisnap_core.food_database import CatalogFoodDatabase
from nutrisnap_core.prompts import IMAGE_ATTACHED, NO_IMAGE
from nutrisnap_core.schemas import GenerateDietPlanOutput


def _user_text(messages):
    content = messages[1]["content"]
    return content if isinstance(content, str) else content[0]["text"]


def _description(messages):
    line = next(l for l in _user_text(messages).splitlines() if l.startswith("Description:"))
    return line.split(":", 1)[1].strip()


def answer_from_lookup(messages):
    """Answer with the looked-up item whose name matches the description."""
    wanted = _description(messages).lower()
    items = json.loads(messages[-1]["content"])
    match = next(item for item in items if item["name"].lower() == wanted)
    return json_reply({"foodItem": match})


def echo_description(messages):
    return json_reply({
        "foodItem": {
            "name": _description(messages) or "Unknown food",
            "nutrition": {"calories": 100, "protein": 1, "carbs": 20, "fat": 1},
        }
    })


def test_chicken_breast_end_to_end(snap, fake_openai):
    fake_openai.script(
        tool_reply(tool_call("findFoodItem", {"query": "chicken breast"})),
        answer_from_lookup,
    )
    result = asyncio.run(snap.analyze_food_image({"photoDataUri": "", "description": "chicken breast"}))

    assert result.food_item.name.lower() == "chicken breast"
    assert result.food_item.nutrition.calories == pytest.approx(165)
    assert result.food_item.nutrition.protein == pytest.approx(31)


def test_description_only_returns_finite_non_negative_nutrition(snap, fake_openai):
    fake_openai.script(echo_description)
    result = asyncio.run(snap.analyze_food_image({"photoDataUri": "", "description": "banana"}))

    nutrition = result.food_item.nutrition
    for value in (nutrition.calories, nutrition.protein, nutrition.carbs, nutrition.fat):
        assert math.isfinite(value) and value >= 0
    assert "Photo: " + NO_IMAGE in _user_text(fake_openai.calls[0]["messages"])
    assert fake_openai.calls[0]["tools"][0]["function"]["name"] == "findFoodItem"


def test_photo_is_forwarded_to_the_model(snap, fake_openai, png_data_uri):
    fake_openai.script(echo_description)
    asyncio.run(snap.analyze_food_image({"photoDataUri": png_data_uri}))

    user = fake_openai.calls[0]["messages"][1]["content"]
    assert IMAGE_ATTACHED in user[0]["text"]
    assert user[1]["image_url"]["url"] == png_data_uri


def test_no_photo_and_no_description_still_asks_for_best_guess(snap, fake_openai):
    fake_openai.script(echo_description)
    result = asyncio.run(snap.analyze_food_image({"photoDataUri": ""}))

    assert result.food_item.name == "Unknown food"
    assert "make your best guess" in _user_text(fake_openai.calls[0]["messages"])


def test_invalid_input_never_reaches_the_model(snap, fake_openai, diet_plan_payload):
    del diet_plan_payload["age"]
    with pytest.raises(SchemaViolation) as exc:
        asyncio.run(snap.generate_diet_plan(diet_plan_payload))
    assert exc.value.path == "age"

    with pytest.raises(SchemaViolation):
        asyncio.run(snap.analyze_food_image({"description": "apple"}))
    assert fake_openai.calls == []


def test_repeated_calls_share_no_state(snap, fake_openai):
    fake_openai.script(echo_description, echo_description)
    request = {"photoDataUri": "", "description": "apple"}
    first = asyncio.run(snap.analyze_food_image(request))
    second = asyncio.run(snap.analyze_food_image(request))

    assert first == second
    assert fake_openai.calls[0]["messages"] == fake_openai.calls[1]["messages"]
    assert request == {"photoDataUri": "", "description": "apple"}


def test_concurrent_calls_are_independent(snap, fake_openai):
    fake_openai.script(echo_description, echo_description)

    async def both():
        return await asyncio.gather(
            snap.analyze_food_image({"photoDataUri": "", "description": "apple"}),
            snap.analyze_food_image({"photoDataUri": "", "description": "rice"}),
        )

    first, second = asyncio.run(both())
    assert first.food_item.name == "apple"
    assert second.food_item.name == "rice"
    assert all(len(call["messages"]) == 2 for call in fake_openai.calls)


def test_generate_diet_plan(snap, fake_openai, diet_plan_payload, diet_plan_reply):
    fake_openai.script(json_reply(diet_plan_reply))
    plan = asyncio.run(snap.generate_diet_plan(diet_plan_payload))

    assert [meal.meal_time for meal in plan.diet_plan] == ["Breakfast", "Lunch"]
    assert plan.diet_plan[1].micronutrient_focus is None
    call = fake_openai.calls[0]
    assert call["tools"] is None
    assert call["response_format"]["json_schema"]["name"] == "GenerateDietPlanOutput"
    assert "Foods to Avoid: peanuts" in _user_text(call["messages"])


def test_diet_plan_answer_is_validated(snap, fake_openai, diet_plan_payload, diet_plan_reply):
    diet_plan_reply["dietPlan"][0]["calories"] = "lots"
    fake_openai.script(json_reply(diet_plan_reply))
    with pytest.raises(SchemaViolation) as exc:
        asyncio.run(snap.generate_diet_plan(diet_plan_payload))
    assert exc.value.path == "dietPlan[0].calories"


def test_from_settings_wires_configured_backend(fake_openai):
    snap = NutriSnap.from_settings(Settings(max_tool_rounds=1, food_lookup="catalog"), openai_client=fake_openai)
    assert isinstance(snap.food_lookup, CatalogFoodDatabase)
    assert snap.generation_client.max_tool_rounds == 1
    assert snap.generation_client.openai_client is fake_openai


class CannedGenerationClient:
    """Returns a prebuilt answer; records the prompts it was given."""

    def __init__(self, answer):
        self.answer = answer
        self.prompts = []

    async def run(self, prompt, output_model, tools=()):
        self.prompts.append(prompt)
        return self.answer


def test_flow_returns_the_generation_answer_as_is(diet_plan_payload, diet_plan_reply):
    answer = GenerateDietPlanOutput.model_validate(diet_plan_reply)
    snap = NutriSnap(CannedGenerationClient(answer), CatalogFoodDatabase())

    assert asyncio.run(snap.generate_diet_plan(diet_plan_payload)) is answer
    assert len(snap.generation_client.prompts) == 1


def test_from_settings_passes_base_url(monkeypatch):
    monkeypatch.setenv("OPENAI_API_KEY", "sk-local")
    snap = NutriSnap.from_settings(Settings(base_url="http://127.0.0.1:9/v1"))
    assert str(snap.generation_client.openai_client.client.base_url) == "http://127.0.0.1:9/v1/"
