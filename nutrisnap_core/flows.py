import logging
from typing import Any, Awaitable, Callable, Optional, TypeVar

from generation_client import GenerationClient, OpenAIClient
from .config import Settings
from .food_database import FoodLookupService, build_food_lookup
from .prompts import ANALYZE_FOOD_IMAGE_TEMPLATE, GENERATE_DIET_PLAN_TEMPLATE, render_prompt
from .schemas import (
    AnalyzeFoodImageInput,
    AnalyzeFoodImageOutput,
    GenerateDietPlanInput,
    GenerateDietPlanOutput,
)
from .tools import find_food_item_tool
from .validation import validate_input

logger = logging.getLogger(__name__)

ResultT = TypeVar("ResultT")


class NutriSnap:
    """The two NutriSnap flows over an injected generation client.

    Every call validates its input, renders the prompt and runs a single
    generation, which validates the answer. Nothing is kept between calls,
    so concurrent calls on one instance are independent.

    The underlying HTTP pool belongs to the event loop it was first used on.
    Close the instance (or use it as an async context manager) before that
    loop ends, and build a new one for the next loop.
    """

    def __init__(self, generation_client: GenerationClient, food_lookup: FoodLookupService):
        self.generation_client = generation_client
        self.food_lookup = food_lookup

    @classmethod
    def from_settings(cls, settings: Settings, openai_client: Optional[OpenAIClient] = None) -> "NutriSnap":
        openai_client = openai_client or OpenAIClient(
            model=settings.model,
            temperature=settings.temperature,
            timeout=settings.timeout_seconds,
            base_url=settings.base_url,
        )
        return cls(
            GenerationClient(openai_client, max_tool_rounds=settings.max_tool_rounds),
            build_food_lookup(settings.food_lookup),
        )

    async def aclose(self) -> None:
        await self.generation_client.openai_client.close()

    async def __aenter__(self) -> "NutriSnap":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()

    async def analyze_food_image(self, payload: Any) -> AnalyzeFoodImageOutput:
        """Identify a food from a photo and/or description and estimate its macros."""
        request = validate_input(AnalyzeFoodImageInput, payload)
        prompt = render_prompt(ANALYZE_FOOD_IMAGE_TEMPLATE, request)
        logger.info(
            "Analyzing food (image=%s, description=%r)",
            bool(prompt.media),
            request.description or "",
        )
        output = await self.generation_client.run(
            prompt,
            AnalyzeFoodImageOutput,
            tools=[find_food_item_tool(self.food_lookup)],
        )
        logger.info("Identified %s (%s kcal)", output.food_item.name, output.food_item.nutrition.calories)
        return output

    async def generate_diet_plan(self, payload: Any) -> GenerateDietPlanOutput:
        """Generate a meal-by-meal diet plan from biometrics and preferences."""
        request = validate_input(GenerateDietPlanInput, payload)
        prompt = render_prompt(GENERATE_DIET_PLAN_TEMPLATE, request)
        logger.info("Generating diet plan (goal=%s, activity=%s)", request.health_goal, request.activity_level)
        output = await self.generation_client.run(prompt, GenerateDietPlanOutput)
        logger.info("Diet plan ready with %d meal(s)", len(output.diet_plan))
        return output


async def with_nutrisnap(settings: Settings, call: Callable[[NutriSnap], Awaitable[ResultT]]) -> ResultT:
    """Run one call on a NutriSnap built for, and closed within, the running event loop.

    Meant as the coroutine handed to ``asyncio.run`` by synchronous callers.
    """
    async with NutriSnap.from_settings(settings) as snap:
        return await call(snap)
