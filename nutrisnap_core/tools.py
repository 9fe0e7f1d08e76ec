"""Tools the model may call while generating a structured answer."""
import json
from dataclasses import dataclass
from typing import Any, Awaitable, Callable, Dict, Type

from pydantic import BaseModel

from .food_database import FoodLookupService
from .schemas import FindFoodItemInput

FIND_FOOD_ITEM = "findFoodItem"


@dataclass(frozen=True)
class Tool:
    name: str
    description: str
    args_model: Type[BaseModel]
    handler: Callable[[BaseModel], Awaitable[Any]]

    def definition(self) -> Dict[str, Any]:
        """Tool definition in OpenAI function format."""
        return {
            "type": "function",
            "function": {
                "name": self.name,
                "description": self.description,
                "parameters": self.args_model.model_json_schema(by_alias=True),
            },
        }

    async def invoke(self, arguments: Dict[str, Any]) -> str:
        """Validate raw arguments, run the handler and return JSON text."""
        args = self.args_model.model_validate(arguments)
        result = await self.handler(args)
        return json.dumps(_jsonable(result))


def _jsonable(value: Any) -> Any:
    if isinstance(value, BaseModel):
        return value.model_dump(by_alias=True, exclude_none=True)
    if isinstance(value, (list, tuple)):
        return [_jsonable(v) for v in value]
    return value


def find_food_item_tool(lookup: FoodLookupService) -> Tool:
    async def _find(args: FindFoodItemInput):
        return await lookup.search(args.query)

    return Tool(
        name=FIND_FOOD_ITEM,
        description="Searches a food database for items matching a given query.",
        args_model=FindFoodItemInput,
        handler=_find,
    )
