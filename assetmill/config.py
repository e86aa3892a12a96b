from __future__ import annotations

from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, Field, ValidationError, field_validator

from .manager import DEFAULT_TYPE, AssetManager


class AssetsConfig(BaseModel):
    """Top-level configuration for an assetmill run loaded from YAML."""
    description: str | None = Field(default=None, description="Optional description of this config file")
    options: dict[str, Any] = Field(default_factory=dict, description="Options merged over the manager defaults")
    paths: list[str] = Field(default_factory=list, description="Source directories, relative to 'directory' when set")
    directory: str | None = Field(default=None, description="Base directory for source and output paths")
    type: str = Field(default=DEFAULT_TYPE, description="Directive verb, e.g. 'javascripts' or 'stylesheets'")
    output: str | None = Field(default=None, description="Default output path for 'write'")
    gzip: bool = Field(default=False, description="Also write gzip variants by default")

    @field_validator("type")
    @classmethod
    def _validate_type(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("'type' must not be empty")
        return v.strip()

    def build_manager(self) -> AssetManager:
        return AssetManager(
            options=self.options,
            paths=self.paths,
            directory=self.directory,
            type=self.type,
        )


def load_config(path: str | Path) -> AssetsConfig:
    """Load YAML config from 'path' and validate into an AssetsConfig model."""
    with open(path, "r", encoding="utf-8") as f:
        data = yaml.safe_load(f) or {}
    try:
        return AssetsConfig.model_validate(data)
    except ValidationError as e:
        # Re-raise with a cleaner message for CLI users
        raise ValueError(str(e))
