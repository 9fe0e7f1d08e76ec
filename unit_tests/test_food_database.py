# unit_tests/test_food_database.py
"""
Unit Tests for the Food Lookup Service and the findFoodItem tool
================================================================
Run with: python -m pytest unit_tests/test_food_database.py -v
"""

import asyncio
import json

import pytest

from nutrisnap_core.food_database import CatalogFoodDatabase, StubFoodDatabase, build_food_lookup
from nutrisnap_core.tools import FIND_FOOD_ITEM, find_food_item_tool

APPLE = {"name": "Apple", "nutrition": {"calories": 95, "protein": 0.3, "carbs": 25, "fat": 0.3}}


def _dump(items):
    return [item.model_dump() for item in items]


def test_stub_returns_fixed_catalog_for_any_query():
    db = StubFoodDatabase()
    apple = asyncio.run(db.search("apple"))
    other = asyncio.run(db.search("nonexistent-xyz"))

    assert APPLE in _dump(apple)
    assert [item.name for item in other] == ["Apple", "Chicken Breast"]
    assert _dump(apple) == _dump(other)


def test_stub_results_are_fresh_copies():
    db = StubFoodDatabase()
    first = asyncio.run(db.search("apple"))
    first[0].name = "Changed"
    assert asyncio.run(db.search("apple"))[0].name == "Apple"


def test_catalog_filters_by_name():
    db = CatalogFoodDatabase()
    assert _dump(asyncio.run(db.search("apple"))) == [APPLE]
    assert [i.name for i in asyncio.run(db.search("Grilled  CHICKEN breast"))] == ["Chicken Breast"]
    assert asyncio.run(db.search("nonexistent-xyz")) == []
    assert asyncio.run(db.search("   ")) == []


def test_build_food_lookup():
    assert isinstance(build_food_lookup(), StubFoodDatabase)
    assert isinstance(build_food_lookup("catalog"), CatalogFoodDatabase)
    with pytest.raises(ValueError):
        build_food_lookup("usda")


def test_find_food_item_tool_definition():
    definition = find_food_item_tool(StubFoodDatabase()).definition()
    assert definition["type"] == "function"
    assert definition["function"]["name"] == FIND_FOOD_ITEM
    assert definition["function"]["parameters"]["required"] == ["query"]


def test_find_food_item_tool_returns_json_list():
    tool = find_food_item_tool(CatalogFoodDatabase())
    result = json.loads(asyncio.run(tool.invoke({"query": "apple"})))
    assert result == [APPLE]
    assert json.loads(asyncio.run(tool.invoke({"query": "nonexistent-xyz"}))) == []
