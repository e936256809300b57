import pytest

from workout_tracker.utils.config import EngineConfig, get_config, reset_config


def test_defaults():
    config = EngineConfig()
    assert config.moving_speed_threshold_kmh == 1.0
    assert not config.creator_needs_correction("Garmin")
    assert config.creator_needs_correction("Unknown Phone")
    assert config.creator_needs_correction(None)
    assert config.validate_configuration()


def test_update_settings_records_user_inputs():
    config = get_config()
    config.update_processing_settings(moving_speed_threshold_kmh=2.5)
    config.update_record_settings(breakdown_unit="mi")

    summary = config.get_summary()
    assert summary['processing']['moving_speed_threshold_kmh'] == 2.5
    assert summary['records']['breakdown_unit'] == "mi"
    assert summary['user_inputs'] == {
        'processing_moving_speed_threshold_kmh': 2.5,
        'records_breakdown_unit': "mi",
    }


def test_unknown_setting_rejected():
    with pytest.raises(ValueError):
        get_config().update_processing_settings(smoothing_window=5)


def test_allowlist_update_is_stored_as_tuple():
    config = get_config()
    config.update_elevation_settings(correct_altitude_creators=["A", "B"])
    assert config.elevation.correct_altitude_creators == ("A", "B")


def test_validation_errors():
    config = EngineConfig()
    config.update_processing_settings(moving_speed_threshold_kmh=-1.0)
    config.update_record_settings(breakdown_count=0, extra_targets={"bad": -5.0})

    with pytest.raises(ValueError) as exc:
        config.validate_configuration()

    message = str(exc.value)
    assert "Moving speed threshold" in message
    assert "Breakdown count" in message
    assert "'bad'" in message


def test_reset_config_replaces_global():
    get_config().update_processing_settings(moving_speed_threshold_kmh=3.0)
    fresh = reset_config()
    assert fresh is get_config()
    assert fresh.moving_speed_threshold_kmh == 1.0
