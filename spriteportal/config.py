"""Validated cleaning configuration."""

from __future__ import annotations

import json
import logging
import os
from pathlib import Path
from typing import Any, Optional

from pydantic import BaseModel, Field, ValidationError as PydanticValidationError, field_validator

from .core import CleanSettings, GridConfig, PortalSize
from .core import grid as grid_math
from .core.errors import ConfigurationError, ValidationError
from .utils import validators

logger = logging.getLogger(__name__)

DEFAULT_WORKERS = max(1, int(os.environ.get("SPRITEPORTAL_WORKERS", "1") or 1))


class CleanRequest(BaseModel):
    """Incoming settings payload for a cleaning pass."""

    cols: int = Field(5, ge=1)
    rows: int = Field(1, ge=1)
    portal: Optional[tuple[int, int]] = None
    tolerance: float = Field(20.0, ge=0, le=validators.MAX_TOLERANCE)
    center: bool = True
    output_cols: Optional[int] = Field(None, ge=1)
    fps: float = Field(8.0, ge=1, le=validators.MAX_FPS)
    workers: int = Field(DEFAULT_WORKERS, ge=1)

    @field_validator("portal", mode="before")
    @classmethod
    def _parse_portal(cls, value):
        if value in (None, "", "null"):
            return None
        if isinstance(value, str):
            try:
                return validators.parse_size(value, field="Portal")
            except ValidationError as exc:
                raise ValueError(str(exc)) from exc
        if isinstance(value, dict):
            return value.get("width"), value.get("height")
        if isinstance(value, (list, tuple)) and len(value) == 2:
            return tuple(value)
        raise ValueError("Portal must be WIDTHxHEIGHT")

    @field_validator("portal")
    @classmethod
    def _positive_portal(cls, value):
        if value is not None and (value[0] < 1 or value[1] < 1):
            raise ValueError("Portal dimensions must be at least 1")
        return value

    @classmethod
    def parse(cls, payload: dict[str, Any]) -> "CleanRequest":
        """Validate a payload, surfacing failures as ``ConfigurationError``."""

        try:
            return cls.model_validate(payload)
        except PydanticValidationError as exc:
            raise ConfigurationError(str(exc)) from exc

    def to_settings(self, sheet_width: int, sheet_height: int) -> CleanSettings:
        grid = GridConfig(self.cols, self.rows)
        if self.portal:
            portal = PortalSize(*self.portal)
        else:
            portal = grid_math.default_portal(grid, sheet_width, sheet_height)
        return CleanSettings(
            grid=grid,
            portal=portal,
            tolerance=self.tolerance,
            center=self.center,
            output_cols=self.output_cols,
            workers=self.workers,
        )


def load_request(path: Path, overrides: Optional[dict[str, Any]] = None) -> CleanRequest:
    """Read a JSON settings file, letting explicit overrides win."""

    try:
        payload = json.loads(path.read_text(encoding="utf-8"))
    except FileNotFoundError as exc:
        raise ConfigurationError(f"Settings file not found: {path}") from exc
    except json.JSONDecodeError as exc:
        raise ConfigurationError(f"Invalid settings JSON: {exc}") from exc
    if not isinstance(payload, dict):
        raise ConfigurationError("Settings JSON must be an object")
    payload.update({k: v for k, v in (overrides or {}).items() if v is not None})
    logger.debug("Loaded settings from %s: %s", path, payload)
    return CleanRequest.parse(payload)
