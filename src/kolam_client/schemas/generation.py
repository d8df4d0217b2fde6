"""Generation request and result schemas.

`GenerationParameters` is the validated form of the collaborator's raw input
and serializes to the service's wire names (`ND`, `sigmaref`, ...).
`GenerationResult` is the immutable artifact built from a successful response.
"""

from __future__ import annotations

import base64
import binascii
from enum import StrEnum
from typing import Any

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator


class BoundaryType(StrEnum):
    DIAMOND = "diamond"
    CORNERS = "corners"
    FISH = "fish"
    WAVES = "waves"
    FRACTAL = "fractal"
    ORGANIC = "organic"


class Theme(StrEnum):
    LIGHT = "light"
    DARK = "dark"


FALLBACK_COLOR = "#1f77b4"

# Swatch defaults offered to the collaborator when the boundary changes
DEFAULT_COLORS: dict[BoundaryType, str] = {
    BoundaryType.DIAMOND: "#e377c2",
    BoundaryType.CORNERS: "#1f77b4",
    BoundaryType.FISH: "#ff7f0e",
    BoundaryType.WAVES: "#2ca02c",
    BoundaryType.FRACTAL: "#9467bd",
    BoundaryType.ORGANIC: "#8c564b",
}


def default_color_for(boundary: BoundaryType | str) -> str:
    """Return the default stroke color for a boundary type."""
    try:
        return DEFAULT_COLORS[BoundaryType(boundary)]
    except ValueError:
        return FALLBACK_COLOR


class GenerationParameters(BaseModel):
    """User-supplied parameters for one generation request.

    Accepts either the field names or the service's wire names, so a raw form
    payload (``{"ND": 15, "sigmaref": 0.6, ...}``) validates directly. Every
    field except `theme` is required, and numbers and flags are not coerced
    (``True`` is not a density, ``"yes"`` is not a flag).
    """

    model_config = ConfigDict(frozen=True)

    density: int = Field(
        ge=1,
        strict=True,
        validation_alias=AliasChoices("density", "ND"),
        serialization_alias="ND",
    )
    smoothing: float = Field(
        ge=0,
        strict=True,
        allow_inf_nan=False,
        validation_alias=AliasChoices("smoothing", "sigmaref"),
        serialization_alias="sigmaref",
    )
    boundary_kind: BoundaryType = Field(
        validation_alias=AliasChoices("boundary_kind", "boundary_type"),
        serialization_alias="boundary_type",
    )
    color_hex: str = Field(
        pattern=r"^#[0-9a-fA-F]{6}$",
        validation_alias=AliasChoices("color_hex", "kolam_color"),
        serialization_alias="kolam_color",
    )
    one_stroke: bool = Field(strict=True)
    # No theme selected falls back to light rather than failing
    theme: Theme = Theme.LIGHT

    @field_validator("color_hex")
    @classmethod
    def _lowercase_color(cls, v: str) -> str:
        return v.lower()

    @field_validator("theme", mode="before")
    @classmethod
    def _default_missing_theme(cls, v: object) -> object:
        return Theme.LIGHT if v is None or v == "" else v

    def to_request_body(self) -> dict[str, Any]:
        """Serialize to the JSON body expected by the generate endpoint."""
        return self.model_dump(mode="json", by_alias=True)


class GenerationResult(BaseModel):
    """Immutable artifact produced by a successful generation.

    Attributes:
        image_data: Opaque image payload, normally a base64 data URI.
        boundary_type: Boundary the service actually rendered.
        path_count: Number of drawn paths.
        is_one_stroke: Whether the pattern is a single continuous path.
        elapsed_seconds: Service-reported generation time.
        message: Service-reported success message.
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    image_data: str = Field(alias="image", min_length=1)
    boundary_type: str = ""
    path_count: int = Field(ge=0)
    is_one_stroke: bool
    elapsed_seconds: float = Field(alias="generation_time", ge=0)
    message: str = "Beautiful kolam generated successfully!"

    @field_validator("message", mode="before")
    @classmethod
    def _default_empty_message(cls, v: object) -> object:
        return "Beautiful kolam generated successfully!" if not v else v

    @classmethod
    def from_response(cls, payload: dict[str, Any]) -> GenerationResult:
        """Build a result from a ``success: true`` response body."""
        return cls.model_validate(payload)

    @property
    def media_type(self) -> str | None:
        """Media type declared by the data URI, if the payload is one."""
        if not self.image_data.startswith("data:"):
            return None
        header = self.image_data[5:].split(",", 1)[0]
        return header.split(";", 1)[0] or None

    def image_bytes(self) -> bytes:
        """Decode a base64 data URI payload into raw image bytes.

        Raises:
            ValueError: If the payload is not a base64 data URI.
        """
        header, sep, data = self.image_data.partition(",")
        if not sep or not header.startswith("data:") or ";base64" not in header:
            raise ValueError("Image payload is not a base64 data URI")
        try:
            return base64.b64decode(data, validate=True)
        except binascii.Error as e:
            raise ValueError(f"Image payload is not valid base64: {e}") from e
