"""Error kinds surfaced by the NutriSnap gateway."""
from typing import Any


class GatewayError(Exception):
    """Base class for every failure a flow can surface to its caller."""


class SchemaViolation(GatewayError):
    """A payload failed shape validation on its way into or out of the model."""

    def __init__(self, direction: str, path: str, expected: str, actual: Any):
        self.direction = direction
        self.path = path
        self.expected = expected
        self.actual = actual
        super().__init__(
            f"{direction} schema violation at '{path}': expected {expected}, got {actual}"
        )


class EmptyGenerationError(GatewayError):
    """The model finished without a usable structured answer."""


class UpstreamCallFailure(GatewayError):
    """The model service could not be reached or rejected the request."""
