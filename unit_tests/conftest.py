import sys
from pathlib import Path

import pytest

# Add root to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from fakes import PNG_BYTES, FakeOpenAIClient
from generation_client import GenerationClient
from nutrisnap_core.flows import NutriSnap
from nutrisnap_core.food_database import StubFoodDatabase
from nutrisnap_core.utils import file_to_data_uri


@pytest.fixture
def png_data_uri():
    return file_to_data_uri(PNG_BYTES, "image/png")


@pytest.fixture
def fake_openai():
    return FakeOpenAIClient()


@pytest.fixture
def snap(fake_openai):
    return NutriSnap(GenerationClient(fake_openai, max_tool_rounds=3), StubFoodDatabase())


@pytest.fixture
def diet_plan_payload():
    return {
        "age": 30,
        "gender": "male",
        "height": 180,
        "weight": 80,
        "activityLevel": "moderatelyActive",
        "healthGoal": "muscleBuilding",
        "foodChoices": "non-vegetarian",
        "foodsToAvoid": "peanuts",
    }


@pytest.fixture
def diet_plan_reply():
    return {
        "dietPlan": [
            {
                "mealTime": "Breakfast",
                "foodItems": "Oats, banana & whey",
                "portionSize": "1 bowl",
                "calories": 450,
                "protein": 35,
                "carbs": 60,
                "fat": 8.5,
                "micronutrientFocus": "Rich in Fiber",
            },
            {
                "mealTime": "Lunch",
                "foodItems": "Chicken breast, rice, broccoli",
                "portionSize": "150 grams chicken, 1 cup rice",
                "calories": 620,
                "protein": 52,
                "carbs": 70,
                "fat": 12,
            },
        ]
    }
