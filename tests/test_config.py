import pytest
from pydantic import ValidationError

from parlight.config import Settings


def test_defaults(monkeypatch):
    for name in ("PORT", "HOST", "DMX_DRIVER", "DMX_DEVICE", "START_CHANNEL", "DMX_FPS", "ARTNET_DEBUG"):
        monkeypatch.delenv(name, raising=False)
    settings = Settings.from_env()
    assert settings.port == 3000
    assert settings.dmx_driver == "artnet"
    assert settings.dmx_device == "192.168.10.221"
    assert settings.start_channel == 1
    assert settings.dmx_fps == 60
    assert settings.artnet_debug is False


def test_from_env(monkeypatch):
    monkeypatch.setenv("PORT", "8080")
    monkeypatch.setenv("DMX_DRIVER", "Memory")
    monkeypatch.setenv("DMX_DEVICE", "10.0.0.7")
    monkeypatch.setenv("START_CHANNEL", "10")
    monkeypatch.setenv("ARTNET_DEBUG", "yes")
    monkeypatch.setenv("LOG_LEVEL", "debug")
    settings = Settings.from_env()
    assert settings.port == 8080
    assert settings.dmx_driver == "memory"
    assert settings.dmx_device == "10.0.0.7"
    assert settings.start_channel == 10
    assert settings.artnet_debug is True
    assert settings.log_level == "DEBUG"


@pytest.mark.parametrize("overrides", [{"dmx_driver": "usb"}, {"start_channel": 0}, {"start_channel": 507}, {"dmx_fps": 0}])
def test_invalid_settings(overrides):
    with pytest.raises(ValidationError):
        Settings(**overrides)
