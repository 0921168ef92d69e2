"""
Environment-driven defaults for the spiral engine.

All values are read once at import time. Override them per process with
environment variables (e.g. in a ``.env`` loaded by the host app):

    SPIRAL_TARGET_HEIGHT=12 SPIRAL_VOLATILITY_WINDOW=30 python app.py
"""

import os

# Bounding box the projected spiral is scaled into
TARGET_HEIGHT = float(os.getenv("SPIRAL_TARGET_HEIGHT", "10"))
TARGET_MAX_RADIUS = float(os.getenv("SPIRAL_TARGET_MAX_RADIUS", "5"))

# Projection clamp used by the pipeline (the bare projector defaults to 0.5)
MIN_RADIUS = float(os.getenv("SPIRAL_MIN_RADIUS", "0.3"))

# Analytics
VOLATILITY_WINDOW = int(os.getenv("SPIRAL_VOLATILITY_WINDOW", "20"))
CYCLE_BUCKETS = int(os.getenv("SPIRAL_CYCLE_BUCKETS", "36"))  # 10° bins

# Cycle overlay layout
OVERLAY_CYCLE_HEIGHT = float(os.getenv("SPIRAL_OVERLAY_CYCLE_HEIGHT", "2"))
OVERLAY_OFFSET = float(os.getenv("SPIRAL_OVERLAY_OFFSET", "0.1"))

# Analytics cache lifetime in seconds
ANALYTICS_TTL = int(os.getenv("SPIRAL_ANALYTICS_TTL", "300"))
