"""Shape validation on both sides of the model boundary."""
import json
import logging
from collections.abc import Mapping
from typing import Any, Type, TypeVar

from pydantic import BaseModel, ValidationError

from .errors import SchemaViolation

logger = logging.getLogger(__name__)

ModelT = TypeVar("ModelT", bound=BaseModel)

_MAX_REPR = 80


def _describe(value: Any) -> str:
    text = repr(value)
    if len(text) > _MAX_REPR:
        text = text[: _MAX_REPR - 3] + "..."
    return f"{type(value).__name__} {text}"


def _wire_path(model: Type[BaseModel], loc: tuple) -> str:
    """Turn a pydantic error location into a dotted wire path."""
    parts = []
    current: Any = model
    for part in loc:
        if isinstance(part, int):
            parts.append(f"[{part}]")
            continue
        name = str(part)
        fields = getattr(current, "model_fields", None) or {}
        field = fields.get(name) or next((f for f in fields.values() if f.alias == name), None)
        current = None
        if field is not None:
            name = field.alias or name
            annotation = field.annotation
            args = getattr(annotation, "__args__", ()) or ()
            current = next((a for a in (annotation, *args) if isinstance(a, type) and issubclass(a, BaseModel)), None)
        parts.append(("." if parts else "") + name)
    return "".join(parts) or "$"


def _first_violation(direction: str, model: Type[BaseModel], exc: ValidationError) -> SchemaViolation:
    error = exc.errors()[0]
    loc = tuple(error.get("loc", ()))
    actual = "nothing" if error.get("type") == "missing" else _describe(error.get("input"))
    return SchemaViolation(direction, _wire_path(model, loc), error.get("msg", "a valid value"), actual)


def _validate(direction: str, model: Type[ModelT], payload: Any) -> ModelT:
    if isinstance(payload, model):
        payload = payload.model_dump(by_alias=True, exclude_unset=True)
    if not isinstance(payload, Mapping):
        raise SchemaViolation(direction, "$", f"an object matching {model.__name__}", _describe(payload))
    try:
        return model.model_validate(payload)
    except ValidationError as exc:
        violation = _first_violation(direction, model, exc)
        logger.warning("%s", violation)
        raise violation from exc


def validate_input(model: Type[ModelT], payload: Any) -> ModelT:
    """Validate a caller-supplied payload before it reaches the model."""
    return _validate("input", model, payload)


def validate_output(model: Type[ModelT], payload: Any) -> ModelT:
    """Validate the model's structured reply before it reaches the caller."""
    return _validate("output", model, payload)


def parse_json_output(model: Type[ModelT], text: str) -> ModelT:
    try:
        payload = json.loads(text)
    except json.JSONDecodeError as exc:
        raise SchemaViolation("output", "$", "a JSON document", _describe(text)) from exc
    return validate_output(model, payload)
