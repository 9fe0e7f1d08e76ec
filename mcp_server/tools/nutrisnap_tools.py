"""NutriSnap flows exposed as MCP tools."""

import json
import logging
from typing import Optional

from mcp.server.fastmcp import FastMCP

from nutrisnap_core.errors import GatewayError
from nutrisnap_core.flows import NutriSnap

logger = logging.getLogger(__name__)


def _error(exc: Exception) -> str:
    return json.dumps({"error": str(exc), "kind": type(exc).__name__}, indent=2)


def register_nutrisnap_tools(mcp: FastMCP, snap: NutriSnap) -> None:
    @mcp.tool()
    async def analyze_food_image(photo_data_uri: str = "", description: Optional[str] = None) -> str:
        """Identify a food and estimate its calories, protein, carbs and fat.

        Args:
            photo_data_uri: Photo as 'data:<mimetype>;base64,<encoded_data>' (may be empty)
            description: Optional description of the food item
        """
        payload = {"photoDataUri": photo_data_uri}
        if description is not None:
            payload["description"] = description
        try:
            result = await snap.analyze_food_image(payload)
        except GatewayError as exc:
            logger.error("analyze_food_image failed: %s", exc)
            return _error(exc)
        return json.dumps(result.model_dump(by_alias=True, exclude_none=True), indent=2)

    @mcp.tool()
    async def generate_diet_plan(
        age: int,
        gender: str,
        height: float,
        weight: float,
        activity_level: str,
        health_goal: str,
        food_choices: Optional[str] = None,
        foods_to_avoid: Optional[str] = None,
        favorite_foods: Optional[str] = None,
        meal_preferences: Optional[str] = None,
        snacking_habits: Optional[str] = None,
        dietary_restrictions: Optional[str] = None,
        target_caloric_intake: Optional[float] = None,
    ) -> str:
        """Generate a personalized meal-by-meal diet plan.

        Args:
            age: Age in years
            gender: male or female
            height: Height in centimeters
            weight: Weight in kilograms
            activity_level: sedentary, lightlyActive, moderatelyActive, veryActive or extraActive
            health_goal: weightLoss, weightGain, muscleBuilding or overallHealth
        """
        optional = {
            "food_choices": food_choices,
            "foods_to_avoid": foods_to_avoid,
            "favorite_foods": favorite_foods,
            "meal_preferences": meal_preferences,
            "snacking_habits": snacking_habits,
            "dietary_restrictions": dietary_restrictions,
            "target_caloric_intake": target_caloric_intake,
        }
        payload = {
            "age": age,
            "gender": gender,
            "height": height,
            "weight": weight,
            "activity_level": activity_level,
            "health_goal": health_goal,
            **{key: value for key, value in optional.items() if value is not None},
        }
        try:
            result = await snap.generate_diet_plan(payload)
        except GatewayError as exc:
            logger.error("generate_diet_plan failed: %s", exc)
            return _error(exc)
        return json.dumps(result.model_dump(by_alias=True, exclude_none=True), indent=2)

    @mcp.tool()
    async def find_food_item(query: str) -> str:
        """Search the food database for items matching a query.

        Args:
            query: The search query (e.g. "apple", "chicken breast")
        """
        items = await snap.food_lookup.search(query)
        return json.dumps([item.model_dump(by_alias=True) for item in items], indent=2)
