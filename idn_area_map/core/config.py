"""Application configuration loaded from environment variables.

The core pipeline never reads the environment itself: ``AppConfig`` /
``MapboxConfig`` are built once (``AppConfig.from_env()``) and passed
explicitly to the URL builders, the generator, and the HTTP layer.

Fail-fast validation:
    ``from_env()`` raises ``ConfigValidationError`` if any numeric
    value is out of its valid range or a required URL is empty.
    A missing ``MAPBOX_ACCESS_TOKEN`` is *not* a validation error:
    Mapbox rendering is simply disabled and the fallback image is served.
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field

from idn_area_map.core.constants import (
    DEFAULT_APP_URL,
    DEFAULT_BOUNDARY_SOURCE_URL,
    DEFAULT_IMAGE_HEIGHT,
    DEFAULT_IMAGE_WIDTH,
    DEFAULT_MAPBOX_API_URL,
    DEFAULT_MAPBOX_STYLE,
    DEFAULT_MAPBOX_TIMEOUT_S,
)
from idn_area_map.core.exceptions import MapError


class ConfigValidationError(MapError):
    """Raised when configuration values are out of valid range.

    Attributes:
        key: The configuration key that failed validation.
        value: The invalid value.
        message: Human-readable description of the valid range.
    """

    default_stage = "config"
    default_code = "CONFIG_VALIDATION_FAILED"

    def __init__(self, key: str, value: object, message: str) -> None:
        self.key = key
        self.value = value
        super().__init__(f"Invalid configuration {key}={value!r}: {message}")


@dataclass(frozen=True, slots=True)
class MapboxConfig:
    """Mapbox Static Images API settings.

    Attributes:
        access_token: Public access token. Empty disables rendering.
        style: Style id as ``owner/style`` (e.g. ``"mapbox/streets-v12"``).
        api_url: API origin without trailing slash.
        timeout_s: Timeout for the image request, in seconds.
    """

    access_token: str = ""
    style: str = DEFAULT_MAPBOX_STYLE
    api_url: str = DEFAULT_MAPBOX_API_URL
    timeout_s: float = DEFAULT_MAPBOX_TIMEOUT_S

    @property
    def is_enabled(self) -> bool:
        """Whether an access token is configured."""
        return bool(self.access_token)

    @property
    def static_base_url(self) -> str:
        """Prefix shared by every static image URL."""
        return f"{self.api_url.rstrip('/')}/styles/v1/{self.style}/static"


@dataclass(frozen=True, slots=True)
class AppConfig:
    """Immutable application configuration.

    Attributes:
        app_url: Public site origin; the fallback preview image lives here.
        boundary_source_url: Base URL of the boundary GeoJSON data set.
        image_width: Preview image width in pixels.
        image_height: Preview image height in pixels.
        mapbox: Mapbox settings.
    """

    app_url: str = DEFAULT_APP_URL
    boundary_source_url: str = DEFAULT_BOUNDARY_SOURCE_URL
    image_width: int = DEFAULT_IMAGE_WIDTH
    image_height: int = DEFAULT_IMAGE_HEIGHT
    mapbox: MapboxConfig = field(default_factory=MapboxConfig)

    @classmethod
    def from_env(cls) -> AppConfig:
        """Load and validate configuration from environment variables.

        Raises:
            ConfigValidationError: If a numeric value is out of range
                or a required URL is empty.
            ValueError: If a numeric environment variable cannot be
                parsed (e.g. ``OG_IMAGE_WIDTH=wide``).
        """
        config = cls(
            app_url=os.getenv("APP_URL", DEFAULT_APP_URL),
            boundary_source_url=os.getenv("BOUNDARY_SOURCE_URL", DEFAULT_BOUNDARY_SOURCE_URL),
            image_width=int(os.getenv("OG_IMAGE_WIDTH", str(DEFAULT_IMAGE_WIDTH))),
            image_height=int(os.getenv("OG_IMAGE_HEIGHT", str(DEFAULT_IMAGE_HEIGHT))),
            mapbox=MapboxConfig(
                access_token=os.getenv("MAPBOX_ACCESS_TOKEN", ""),
                style=os.getenv("MAPBOX_STYLE", DEFAULT_MAPBOX_STYLE),
                api_url=os.getenv("MAPBOX_API_URL", DEFAULT_MAPBOX_API_URL),
                timeout_s=float(os.getenv("MAPBOX_TIMEOUT_S", str(DEFAULT_MAPBOX_TIMEOUT_S))),
            ),
        )
        _validate(config)
        return config


def _validate(config: AppConfig) -> None:
    """Validate configuration ranges.  Raises ``ConfigValidationError``."""
    if config.image_width <= 0:
        raise ConfigValidationError("OG_IMAGE_WIDTH", config.image_width, "must be > 0 (pixels)")

    if config.image_height <= 0:
        raise ConfigValidationError("OG_IMAGE_HEIGHT", config.image_height, "must be > 0 (pixels)")

    if config.mapbox.timeout_s <= 0:
        raise ConfigValidationError(
            "MAPBOX_TIMEOUT_S",
            config.mapbox.timeout_s,
            "must be > 0 (seconds)",
        )

    if not config.app_url:
        raise ConfigValidationError("APP_URL", config.app_url, "must not be empty")

    if not config.boundary_source_url:
        raise ConfigValidationError(
            "BOUNDARY_SOURCE_URL",
            config.boundary_source_url,
            "must not be empty",
        )

    if not config.mapbox.style:
        raise ConfigValidationError("MAPBOX_STYLE", config.mapbox.style, "must not be empty")

    if not config.mapbox.api_url:
        raise ConfigValidationError("MAPBOX_API_URL", config.mapbox.api_url, "must not be empty")
