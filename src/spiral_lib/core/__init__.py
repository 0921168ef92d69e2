"""
spiral_lib.core — Value types, settings, logging, validation, cache, state.

Re-exports the value types and logging helpers so callers can do:

    from spiral_lib.core import SpiralConfig, PricePoint, setup_logging

The cache and state container are imported from their modules directly
(``spiral_lib.core.cache``, ``spiral_lib.core.state``).
"""

from spiral_lib.core.logging_config import get_logger, setup_logging
from spiral_lib.core.models import (
    CYCLE_DAYS,
    CYCLE_TO_INTERVAL,
    DEFAULT_CUSTOM_DAYS,
    INTERVAL_MAX_DAYS,
    Asset,
    AssetType,
    ColorMode,
    CycleDuration,
    DataInterval,
    PointGroup,
    PricePoint,
    PriceScale,
    RingDescriptor,
    ScalingFactors,
    SpiralConfig,
    SpiralPoint,
)
from spiral_lib.core.validation import (
    SpiralConfigError,
    SpiralConfigRequest,
    parse_config,
)

__all__ = [
    # logging
    "get_logger",
    "setup_logging",
    # models
    "CYCLE_DAYS",
    "CYCLE_TO_INTERVAL",
    "DEFAULT_CUSTOM_DAYS",
    "INTERVAL_MAX_DAYS",
    "Asset",
    "AssetType",
    "ColorMode",
    "CycleDuration",
    "DataInterval",
    "PointGroup",
    "PricePoint",
    "PriceScale",
    "RingDescriptor",
    "ScalingFactors",
    "SpiralConfig",
    "SpiralPoint",
    # validation
    "SpiralConfigError",
    "SpiralConfigRequest",
    "parse_config",
]
