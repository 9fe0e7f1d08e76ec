"""Prompt templates for the NutriSnap flows and the renderer that fills them."""
import re
from dataclasses import dataclass, field
from typing import Any, List

from pydantic import BaseModel

from .utils import MediaPart, decode_data_uri

IMAGE_ATTACHED = "[image attached]"
NO_IMAGE = "[no image provided]"

_TEXT_PLACEHOLDER = re.compile(r"\{\{\{\s*(\w+)\s*\}\}\}")
_MEDIA_PLACEHOLDER = re.compile(r"\{\{\s*media\s+url=(\w+)\s*\}\}")


ANALYZE_FOOD_IMAGE_TEMPLATE = """You are an expert nutritionist. You will be given a photo of a food item and an optional description.

You will use this information to identify the food item and estimate its macronutrient content (calories, protein, carbs, and fat).

Use the findFoodItem tool to find the nutritional content for the food. If you cannot identify the food item, or neither a photo nor a description is provided, make your best guess.

Description: {{{description}}}
Photo: {{media url=photoDataUri}}"""


GENERATE_DIET_PLAN_TEMPLATE = """You are an expert nutritionist. You will be given information about a user, including their age, gender, height, weight, activity level, dietary preferences, and health goals.

You will use this information to generate a detailed and personalized diet plan for the user. The diet plan should be safe, healthy, effective, easy to follow, and sustainable in the long term.

Return one entry per meal with the following fields:
- mealTime (e.g., Breakfast, Lunch, Dinner, Snack)
- foodItems (e.g., Oats, Chicken, Vegetables, etc.)
- portionSize (e.g., 1 cup, 150 grams, etc.)
- calories (calories per meal)
- protein, carbs, fat (grams per meal)
- micronutrientFocus (e.g., High in Protein, Low in Carbs, Rich in Fiber)

Here is the user's information:
Age: {{{age}}}
Gender: {{{gender}}}
Height: {{{height}}} cm
Weight: {{{weight}}} kg
Activity Level: {{{activityLevel}}}
Food Choices: {{{foodChoices}}}
Foods to Avoid: {{{foodsToAvoid}}}
Favorite Foods: {{{favoriteFoods}}}
Health Goal: {{{healthGoal}}}
Meal Preferences: {{{mealPreferences}}}
Snacking Habits: {{{snackingHabits}}}
Dietary Restrictions: {{{dietaryRestrictions}}}
Target Caloric Intake: {{{targetCaloricIntake}}}
"""


@dataclass(frozen=True)
class RenderedPrompt:
    text: str
    media: List[MediaPart] = field(default_factory=list)


def format_value(value: Any) -> str:
    """Plain-text rendering of a field value; absent values render empty."""
    if value is None:
        return ""
    if isinstance(value, bool):
        return str(value).lower()
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


def render_prompt(template: str, record: BaseModel) -> RenderedPrompt:
    """Fill ``template`` from an already validated ``record``.

    Text placeholders are keyed by wire name. A media placeholder is swapped for
    a marker and the image bytes decoded from the data URI travel alongside the
    text, in placeholder order.
    """
    values = record.model_dump(by_alias=True)
    media: List[MediaPart] = []

    def _media(match: re.Match) -> str:
        uri = values.get(match.group(1)) or ""
        if not uri.strip():
            return NO_IMAGE
        media.append(decode_data_uri(uri))
        return IMAGE_ATTACHED

    text = _MEDIA_PLACEHOLDER.sub(_media, template)
    text = _TEXT_PLACEHOLDER.sub(lambda m: format_value(values.get(m.group(1))), text)
    return RenderedPrompt(text=text, media=media)
