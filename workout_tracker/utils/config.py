"""
Configuration module for the workout tracker engine.
Groups the tunable domain constants behind one config object.
"""
import math
from dataclasses import dataclass, field
from typing import Dict, Any, Tuple, Optional

DEFAULT_CORRECT_ALTITUDE_CREATORS: Tuple[str, ...] = (
    "garmin",
    "Garmin",
    "Garmin Connect",
    "Apple Watch",
    "Open GPX Tracker for iOS",
    "StravaGPX iPhone",
    "StravaGPX",
    "Workout Tracker",
)

@dataclass
class ProcessingSettings:
    """Track processing configuration."""
    moving_speed_threshold_kmh: float = 1.0  # Below this a sample counts as paused

@dataclass
class ElevationSettings:
    """Elevation correction configuration."""
    # Creators known to record barometric/geoid-corrected elevation
    correct_altitude_creators: Tuple[str, ...] = DEFAULT_CORRECT_ALTITUDE_CREATORS
    source_crs: str = "EPSG:4979"  # WGS84 ellipsoidal height
    target_crs: str = "EPSG:4326+5773"  # WGS84 + EGM96 height
    network_enabled: bool = False  # Let PROJ fetch the geoid grid from its CDN

@dataclass
class RecordSettings:
    """Distance record configuration."""
    # Breakdown defaults used by the facade
    breakdown_count: float = 1.0
    breakdown_unit: str = "km"
    extra_targets: Dict[str, float] = field(default_factory=dict)

class EngineConfig:
    """Main configuration class for the workout tracker engine."""

    def __init__(self):
        self.processing = ProcessingSettings()
        self.elevation = ElevationSettings()
        self.records = RecordSettings()
        self._user_inputs: Dict[str, Any] = {}

    @property
    def moving_speed_threshold_kmh(self) -> float:
        return self.processing.moving_speed_threshold_kmh

    def creator_needs_correction(self, creator: Optional[str]) -> bool:
        """True when elevation from this creator must go through the height model."""
        return creator not in self.elevation.correct_altitude_creators

    def update_processing_settings(self, **kwargs):
        """Update processing settings dynamically."""
        self._update(self.processing, "processing", kwargs)

    def update_elevation_settings(self, **kwargs):
        """Update elevation settings dynamically."""
        if "correct_altitude_creators" in kwargs:
            kwargs["correct_altitude_creators"] = tuple(kwargs["correct_altitude_creators"])
        self._update(self.elevation, "elevation", kwargs)

    def update_record_settings(self, **kwargs):
        """Update record settings dynamically."""
        self._update(self.records, "records", kwargs)

    def _update(self, section, prefix: str, values: Dict[str, Any]):
        for key, value in values.items():
            if hasattr(section, key):
                setattr(section, key, value)
                self._user_inputs[f'{prefix}_{key}'] = value
            else:
                raise ValueError(f"Unknown {prefix} setting: {key}")

    def get_summary(self) -> Dict[str, Any]:
        """Get configuration summary."""
        return {
            'processing': {
                'moving_speed_threshold_kmh': self.processing.moving_speed_threshold_kmh
            },
            'elevation': {
                'correct_altitude_creators': list(self.elevation.correct_altitude_creators),
                'source_crs': self.elevation.source_crs,
                'target_crs': self.elevation.target_crs,
                'network_enabled': self.elevation.network_enabled
            },
            'records': {
                'breakdown_count': self.records.breakdown_count,
                'breakdown_unit': self.records.breakdown_unit,
                'extra_targets': dict(self.records.extra_targets)
            },
            'user_inputs': self._user_inputs
        }

    def validate_configuration(self) -> bool:
        """Validate that configuration values are usable."""
        errors = []

        threshold = self.processing.moving_speed_threshold_kmh
        if math.isnan(threshold) or threshold < 0:
            errors.append("Moving speed threshold must be a non-negative number")

        if self.records.breakdown_count <= 0:
            errors.append("Breakdown count must be greater than 0")

        for label, distance in self.records.extra_targets.items():
            if math.isnan(distance) or distance <= 0:
                errors.append(f"Target distance for '{label}' must be greater than 0")

        if errors:
            raise ValueError(f"Configuration errors: {'; '.join(errors)}")

        return True

# Global configuration instance
config = EngineConfig()

def get_config() -> EngineConfig:
    """Get the global configuration instance."""
    return config

def reset_config() -> EngineConfig:
    """Reset configuration to defaults."""
    global config
    config = EngineConfig()
    return config
