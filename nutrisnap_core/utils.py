import base64
import binascii
import re
from dataclasses import dataclass

import pandas as pd

PROTEIN_G_PER_KG = 1.6

_DATA_URI_RE = re.compile(r"^data:(?P<mime>[\w.+-]+/[\w.+-]+)(?P<params>(;[\w.+-]+=[\w.+-]+)*);base64,(?P<data>.*)$", re.DOTALL)


@dataclass(frozen=True)
class MediaPart:
    """Raw bytes of an attached image plus its declared MIME type."""

    mime_type: str
    data: bytes

    def to_data_uri(self) -> str:
        return file_to_data_uri(self.data, self.mime_type)


def decode_data_uri(uri: str) -> MediaPart:
    """Decode a ``data:<mime>;base64,<payload>`` URI into its raw bytes."""
    match = _DATA_URI_RE.match(uri.strip())
    if not match:
        raise ValueError("expected a data URI of the form 'data:<mimetype>;base64,<encoded_data>'")
    try:
        data = base64.b64decode(match.group("data"), validate=True)
    except (binascii.Error, ValueError) as exc:
        raise ValueError(f"data URI payload is not valid base64: {exc}") from exc
    if not data:
        raise ValueError("data URI carries no bytes")
    return MediaPart(mime_type=match.group("mime").lower(), data=data)


def file_to_data_uri(data: bytes, mime_type: str) -> str:
    """Encode uploaded or captured image bytes the way the flows expect them."""
    return f"data:{mime_type};base64,{base64.b64encode(data).decode('ascii')}"


def recommended_protein_g(weight_kg: float) -> float:
    """Daily protein recommendation shown next to a generated plan."""
    return round(weight_kg * PROTEIN_G_PER_KG, 1)


def compute_totals(df: pd.DataFrame) -> dict:
    """Compute nutrition totals from a diet plan dataframe."""
    totals = df[["calories", "protein", "carbs", "fat"]].sum()
    return {
        "calories": round(float(totals["calories"]), 0),
        "protein": round(float(totals["protein"]), 1),
        "carbs": round(float(totals["carbs"]), 1),
        "fat": round(float(totals["fat"]), 1),
    }
