#!/usr/bin/env python3
"""
Elevation correction for recorded points.

Most GPS receivers report height above the WGS84 ellipsoid; a handful of
devices and apps already report height above mean sea level. Points from
creators outside that allowlist are passed through an EGM96 geoid model.

Design goals:
- Correction failure is never fatal: the raw elevation is kept
- The height model is injectable so callers (and tests) can swap it
"""

from __future__ import annotations

import logging
import math
from typing import Optional, Protocol

import pyproj.network
from pyproj import Transformer
from pyproj.exceptions import ProjError

from ..utils.config import EngineConfig, get_config

logger = logging.getLogger(__name__)


class HeightModel(Protocol):
    """Converts an ellipsoidal height to height above mean sea level.

    Latitude and longitude are given in the [0, 360) convention.
    """

    def height_above_msl(self, lat: float, lng: float, elevation: float) -> float:
        ...


def normalize_degrees(value: float) -> float:
    """Map a signed angle to the [0, 360) convention."""
    if value < 0:
        return value + 360
    return value


def _signed_degrees(value: float) -> float:
    if value > 180:
        return value - 360
    return value


class EGM96HeightModel:
    """Geoid height model backed by a PROJ vertical transformation.

    Needs the EGM96 geoid grid (us_nga_egm96_15.tif): either installed in
    the PROJ data directory (e.g. `projsync --file us_nga_egm96_15.tif`) or
    fetched from the PROJ CDN when `ElevationSettings.network_enabled` is set.
    Ballpark transformations, which leave heights unchanged, are refused.
    """

    # Known-good location used to check the grid is really applied
    CHECK_POINT = (4.0, 50.0, 100.0)

    def __init__(self, config: Optional[EngineConfig] = None):
        self.config = config or get_config()
        if self.config.elevation.network_enabled:
            pyproj.network.set_network_enabled(True)

        self._transformer = Transformer.from_crs(
            self.config.elevation.source_crs,
            self.config.elevation.target_crs,
            always_xy=True,
            allow_ballpark=False,
        )

    @property
    def description(self) -> str:
        return self._transformer.description

    def check(self):
        """Raise ProjError unless the transformation actually shifts heights."""
        lng, lat, height = self.CHECK_POINT
        _, _, corrected = self._transformer.transform(lng, lat, height, errcheck=True)
        if not math.isfinite(corrected) or corrected == height:
            raise ProjError(f"geoid grid not applied by: {self.description}")

    @classmethod
    def create(cls, config: Optional[EngineConfig] = None) -> Optional["EGM96HeightModel"]:
        """Build and check the model, or return None when PROJ cannot provide it."""
        try:
            model = cls(config)
            model.check()
        except ProjError as exc:
            logger.warning("EGM96 height model unavailable, elevations stay raw: %s", exc)
            return None

        logger.debug("Using height model: %s", model.description)
        return model

    def height_above_msl(self, lat: float, lng: float, elevation: float) -> float:
        lat = _signed_degrees(lat)
        lng = _signed_degrees(lng)
        if abs(lat) > 90 or abs(lng) > 180:
            raise ValueError(f"Coordinate out of range: {lat}, {lng}")

        _, _, height = self._transformer.transform(lng, lat, elevation, errcheck=True)
        return height


class PointNormalizer:
    """Applies per-creator elevation correction to raw points."""

    def __init__(
        self,
        height_model: Optional[HeightModel] = None,
        config: Optional[EngineConfig] = None,
        use_default_model: bool = True,
    ):
        self.config = config or get_config()
        if height_model is None and use_default_model:
            height_model = EGM96HeightModel.create(self.config)
        self.height_model = height_model

    def needs_correction(self, creator: Optional[str]) -> bool:
        return self.config.creator_needs_correction(creator)

    def correct_elevation(self, creator: Optional[str], lat: float, lng: float,
                          elevation: Optional[float]) -> Optional[float]:
        """Return the corrected elevation, or the raw one when correction fails."""
        if elevation is None or math.isnan(elevation):
            return elevation

        if not self.needs_correction(creator) or self.height_model is None:
            return elevation

        try:
            height = self.height_model.height_above_msl(
                normalize_degrees(lat), normalize_degrees(lng), elevation
            )
        except (ProjError, ValueError, ArithmeticError) as exc:
            logger.debug("Height model failed at (%s, %s): %s", lat, lng, exc)
            return elevation

        if height is None or not math.isfinite(height):
            return elevation

        return float(height)


def correct_elevation(creator: Optional[str], lat: float, lng: float,
                      elevation: Optional[float],
                      height_model: Optional[HeightModel] = None) -> Optional[float]:
    """Convenience wrapper around PointNormalizer.correct_elevation."""
    normalizer = PointNormalizer(height_model=height_model)
    return normalizer.correct_elevation(creator, lat, lng, elevation)
