"""
spiral_lib.data — Price-data loading boundary.
"""

from spiral_lib.data.loader import (
    PriceDataError,
    download_window,
    fetch_price_series,
    price_points_from_dataframe,
)

__all__ = [
    "PriceDataError",
    "download_window",
    "fetch_price_series",
    "price_points_from_dataframe",
]
