from __future__ import annotations

import pytest
from pydantic import ValidationError

from guildwheel.authority.http import GuildApiAuthority
from guildwheel.authority.memory import InMemoryAuthority
from guildwheel.config.settings import Settings, WheelSettings
from guildwheel.main import DEMO_ROSTER, build_authority
from guildwheel.wheel.geometry import ColorMode


@pytest.fixture
def clean_env(monkeypatch):
    for name in ("GUILDWHEEL_DEBUG", "GUILDWHEEL_AUTHORITY__API_BASE", "GUILDWHEEL_WHEEL__DURATION_MS"):
        monkeypatch.delenv(name, raising=False)
    return monkeypatch


def test_defaults(clean_env):
    settings = Settings(_env_file=None)
    assert settings.debug is False
    assert settings.wheel.duration_ms == 3000.0
    assert settings.wheel.min_turns == 4
    assert settings.wheel.easing == "ease_out_cubic"
    assert settings.wheel.color_mode == ColorMode.PALETTE
    assert settings.authority.default_quality == "silver"
    assert not settings.uses_remote_authority


def test_nested_env_overrides(clean_env):
    clean_env.setenv("GUILDWHEEL_DEBUG", "true")
    clean_env.setenv("GUILDWHEEL_WHEEL__DURATION_MS", "4500")
    clean_env.setenv("GUILDWHEEL_AUTHORITY__API_BASE", "http://guild.local/api")

    settings = Settings(_env_file=None)

    assert settings.debug is True
    assert settings.wheel.duration_ms == 4500.0
    assert settings.uses_remote_authority


def test_easing_validation():
    assert WheelSettings(easing="EASE_OUT_EXPO").easing == "ease_out_expo"
    with pytest.raises(ValidationError):
        WheelSettings(easing="linear")
    with pytest.raises(ValidationError):
        WheelSettings(easing="wobble")


def test_turn_and_duration_validation():
    with pytest.raises(ValidationError):
        WheelSettings(min_turns=1)
    with pytest.raises(ValidationError):
        WheelSettings(min_turns=5, max_turns=4)
    with pytest.raises(ValidationError):
        WheelSettings(duration_ms=0)
    with pytest.raises(ValidationError):
        WheelSettings(boundary_epsilon=0)


def test_build_authority_demo_roster(clean_env):
    authority = build_authority(Settings(_env_file=None))
    assert isinstance(authority, InMemoryAuthority)


def test_build_authority_remote(clean_env):
    clean_env.setenv("GUILDWHEEL_AUTHORITY__API_BASE", "http://guild.local/api")
    authority = build_authority(Settings(_env_file=None))
    assert isinstance(authority, GuildApiAuthority)
    assert len(DEMO_ROSTER) == 8
