"""
Application settings using Pydantic.

Settings are loaded from environment variables with .env file support.
Nested groups use a double underscore, e.g. GUILDWHEEL_WHEEL__DURATION_MS=4500.
"""

from functools import lru_cache
from typing import Literal, Optional

from pydantic import BaseModel, Field, field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from guildwheel.animation.easing import easing_names
from guildwheel.wheel.geometry import ColorMode


class WheelSettings(BaseModel):
    """Wheel layout and spin animation settings."""

    # Geometry (radians, clockwise on screen)
    zero_offset: float = 0.0      # where segment 0 starts; -pi/2 puts it at the top
    pointer_angle: float = 0.0    # where the fixed pointer sits
    label_radius: float = Field(default=0.7, gt=0.0, le=1.0)
    color_mode: ColorMode = ColorMode.PALETTE

    # Animation
    duration_ms: float = Field(default=3000.0, gt=0.0)
    min_turns: int = Field(default=4, ge=2)
    max_turns: int = Field(default=4, ge=2)
    boundary_epsilon: float = Field(default=0.02, gt=0.0)
    easing: str = "ease_out_cubic"

    @field_validator("easing")
    @classmethod
    def _check_easing(cls, value: str) -> str:
        name = value.lower()
        if name not in easing_names():
            raise ValueError(f"Unknown easing function: {value}")
        if name == "linear":
            raise ValueError("Spin easing must decelerate; 'linear' is not allowed")
        return name

    @model_validator(mode="after")
    def _check_turns(self) -> "WheelSettings":
        if self.max_turns < self.min_turns:
            raise ValueError("max_turns must be >= min_turns")
        return self


class AuthoritySettings(BaseModel):
    """Guild API connection settings."""

    api_base: Optional[str] = None  # unset: use the in-memory demo authority
    api_key: Optional[str] = None
    timeout: float = Field(default=10.0, gt=0.0)
    default_quality: Literal["silver", "gold"] = "silver"


class DisplaySettings(BaseModel):
    """Display-related settings."""

    size: int = Field(default=256, ge=32)  # wheel buffer is size x size
    scale: int = Field(default=2, ge=1)
    fps: int = Field(default=60, ge=1)
    title: str = "Guild Wheel"


class Settings(BaseSettings):
    """Main application settings."""

    model_config = SettingsConfigDict(
        env_prefix="GUILDWHEEL_",
        env_file=".env",
        env_file_encoding="utf-8",
        env_nested_delimiter="__",
        extra="ignore",
    )

    debug: bool = False

    # Nested settings
    wheel: WheelSettings = Field(default_factory=WheelSettings)
    authority: AuthoritySettings = Field(default_factory=AuthoritySettings)
    display: DisplaySettings = Field(default_factory=DisplaySettings)

    @property
    def uses_remote_authority(self) -> bool:
        """Check if a guild API is configured."""
        return bool(self.authority.api_base)


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
