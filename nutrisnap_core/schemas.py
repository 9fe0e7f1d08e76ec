"""Input and output records for the NutriSnap flows.

Data only: the validator, the prompt renderer, the generation client and the
tests all read these models, the flows never redefine them. Attributes are
snake_case in Python and camelCase on the wire.
"""
from typing import List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

from .utils import decode_data_uri

Gender = Literal["male", "female"]

ActivityLevel = Literal[
    "sedentary",
    "lightlyActive",
    "moderatelyActive",
    "veryActive",
    "extraActive",
]

HealthGoal = Literal["weightLoss", "weightGain", "muscleBuilding", "overallHealth"]


class InputRecord(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="forbid",
        allow_inf_nan=False,
    )


class OutputRecord(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="ignore",
        allow_inf_nan=False,
        str_strip_whitespace=True,
    )


class Nutrition(OutputRecord):
    calories: float = Field(ge=0, description="The number of calories in the food item.")
    protein: float = Field(ge=0, description="The amount of protein in grams.")
    carbs: float = Field(ge=0, description="The amount of carbohydrates in grams.")
    fat: float = Field(ge=0, description="The amount of fat in grams.")


class FoodItem(OutputRecord):
    name: str = Field(min_length=1, description="The name of the identified food item.")
    nutrition: Nutrition


class AnalyzeFoodImageInput(InputRecord):
    photo_data_uri: str = Field(
        description=(
            "A photo of a food item, as a data URI that must include a MIME type and use "
            "Base64 encoding. Expected format: 'data:<mimetype>;base64,<encoded_data>'. "
            "Empty when only a description is supplied."
        ),
    )
    description: Optional[str] = Field(default=None, description="Optional description of the food item.")

    @field_validator("photo_data_uri")
    @classmethod
    def _check_data_uri(cls, value: str) -> str:
        if value.strip():
            media = decode_data_uri(value)
            if not media.mime_type.startswith("image/"):
                raise ValueError(f"data URI must declare an image MIME type, got '{media.mime_type}'")
        return value


class AnalyzeFoodImageOutput(OutputRecord):
    food_item: FoodItem = Field(description="The identified food item and its nutritional information.")


class GenerateDietPlanInput(InputRecord):
    age: int = Field(gt=0, description="The age of the user.")
    gender: Gender
    height: float = Field(gt=0, description="The height of the user in centimeters.")
    weight: float = Field(gt=0, description="The weight of the user in kilograms.")
    activity_level: ActivityLevel
    health_goal: HealthGoal
    food_choices: Optional[str] = Field(
        default=None, description="Food choices of the user (e.g., vegetarian, vegan, non-vegetarian)."
    )
    foods_to_avoid: Optional[str] = None
    favorite_foods: Optional[str] = None
    meal_preferences: Optional[str] = Field(
        default=None, description="Meal preferences like number of meals per day and portion sizes."
    )
    snacking_habits: Optional[str] = None
    dietary_restrictions: Optional[str] = None
    target_caloric_intake: Optional[float] = Field(default=None, gt=0)


class Meal(OutputRecord):
    meal_time: str = Field(min_length=1, description="Breakfast, Lunch, Dinner, Snack, ...")
    food_items: str = Field(min_length=1, description="Foods served at this meal.")
    portion_size: str = Field(min_length=1, description="e.g. 1 cup, 150 grams")
    calories: float = Field(ge=0)
    protein: float = Field(ge=0, description="Grams of protein.")
    carbs: float = Field(ge=0, description="Grams of carbohydrates.")
    fat: float = Field(ge=0, description="Grams of fat.")
    micronutrient_focus: Optional[str] = Field(
        default=None, description="e.g. High in Protein, Low in Carbs, Rich in Fiber"
    )


class GenerateDietPlanOutput(OutputRecord):
    diet_plan: List[Meal] = Field(min_length=1, description="The meals of the plan in serving order.")


class FindFoodItemInput(InputRecord):
    query: str = Field(description='The search query (e.g., "apple", "chicken breast").')
