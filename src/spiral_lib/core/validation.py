"""
Validation boundary for configs arriving from outside the engine (UI
forms, query strings, JSON payloads).

The engine itself degrades gracefully: a custom cycle of 0 days becomes
365 and an unknown color mode paints the default color. Callers that want
malformed input rejected instead validate through ``SpiralConfigRequest``
before building a ``SpiralConfig``.

Usage:
    from spiral_lib.core.validation import parse_config

    config = parse_config({"cycle_duration": "custom", "custom_days": 45})
"""

import logging
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field, ValidationError, model_validator

from spiral_lib.core.models import (
    DEFAULT_CUSTOM_DAYS,
    ColorMode,
    CycleDuration,
    PriceScale,
    SpiralConfig,
)

logger = logging.getLogger("spiral.validation")


class SpiralConfigError(ValueError):
    """Raised when a config payload fails validation."""


class SpiralConfigRequest(BaseModel):
    """Request body / form model for a spiral configuration."""

    model_config = ConfigDict(frozen=True, extra="ignore", populate_by_name=True)

    cycle_duration: CycleDuration = Field(
        default=CycleDuration.ANNUAL, alias="cycleDuration"
    )
    custom_days: Optional[int] = Field(default=None, gt=0, alias="customDays")
    price_scale: PriceScale = Field(default=PriceScale.LOGARITHMIC, alias="priceScale")
    color_mode: ColorMode = Field(default=ColorMode.RETURN, alias="colorMode")
    cycle_overlay: bool = Field(default=False, alias="cycleOverlay")

    @model_validator(mode="after")
    def _custom_requires_days(self) -> "SpiralConfigRequest":
        if self.cycle_duration is CycleDuration.CUSTOM and self.custom_days is None:
            raise ValueError("custom_days is required when cycle_duration is 'custom'")
        return self

    def to_config(self) -> SpiralConfig:
        return SpiralConfig(
            cycle_duration=self.cycle_duration,
            custom_days=(
                self.custom_days if self.custom_days is not None else DEFAULT_CUSTOM_DAYS
            ),
            price_scale=self.price_scale,
            color_mode=self.color_mode,
            cycle_overlay=self.cycle_overlay,
        )


def parse_config(payload: dict[str, Any]) -> SpiralConfig:
    """Validate *payload* and return an engine config.

    Accepts both snake_case and camelCase keys. Raises
    ``SpiralConfigError`` on any validation failure.
    """
    try:
        return SpiralConfigRequest.model_validate(payload).to_config()
    except ValidationError as exc:
        logger.warning("rejected spiral config: %s", exc.errors(include_url=False))
        raise SpiralConfigError(str(exc)) from exc
