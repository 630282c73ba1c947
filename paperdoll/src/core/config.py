"""
Paper-doll configuration management.

Loads configuration from paperdoll_config.yml with environment variable overrides.
Uses Pydantic for validation and type safety.
"""

import os
from pathlib import Path
from typing import List, Literal, Optional

import yaml
from pydantic import BaseModel, Field, field_validator

from ..constants import PALETTE_FOLDER, PART_PREFIX, RAMP_BLOCK_HEIGHT, RAMP_BLOCK_WIDTH

DEFAULT_CONFIG_PATH = Path("paperdoll_config.yml")


class AssetsConfig(BaseModel):
    """Asset root discovery and scan settings."""
    roots: List[str] = Field(
        default_factory=list,
        description="Asset roots to scan, highest priority first. Empty means auto-discover.",
    )
    part_prefix: str = Field(default=PART_PREFIX, description="Filename prefix of part sheets")
    root_precedence: Literal["first", "last"] = Field(
        default="first",
        description="Which root wins when the same relative path exists under several roots",
    )

    @field_validator("roots", mode="before")
    @classmethod
    def split_roots(cls, value):
        if isinstance(value, str):
            return [root for root in value.split(os.pathsep) if root]
        return value

    def candidate_roots(self, cwd: Optional[Path] = None) -> List[Path]:
        """
        Resolve the roots to scan, in scan order.

        Explicit roots are used as given. Otherwise the working directory's
        assets folders are discovered, nearest first.
        """
        if self.roots:
            roots = [Path(root) for root in self.roots]
        else:
            from ..services.asset_scanner import candidate_assets_roots
            roots = candidate_assets_roots(cwd)
        if self.root_precedence == "last":
            roots = list(reversed(roots))
        return roots


class PalettesConfig(BaseModel):
    """Palette discovery and ramp sampling settings."""
    folder_name: str = Field(default=PALETTE_FOLDER, description="Folder name holding ramp images")
    block_width: int = Field(default=RAMP_BLOCK_WIDTH, ge=1, description="Ramp swatch width in pixels")
    block_height: int = Field(default=RAMP_BLOCK_HEIGHT, ge=1, description="Variant band height in pixels")


class DebugConfig(BaseModel):
    """Debug and development settings."""
    log_level: str = Field(default="INFO", description="Logging level (DEBUG, INFO, WARNING, ERROR)")
    environment: str = Field(default="development", description="development, testing or production")


class PaperDollConfig(BaseModel):
    """Complete paper-doll configuration."""
    assets: AssetsConfig = Field(default_factory=AssetsConfig)
    palettes: PalettesConfig = Field(default_factory=PalettesConfig)
    debug: DebugConfig = Field(default_factory=DebugConfig)

    @classmethod
    def from_yaml(cls, path: Optional[Path] = None) -> "PaperDollConfig":
        """Load configuration from YAML file. A missing file yields defaults."""
        path = path or DEFAULT_CONFIG_PATH

        data = {}
        if path.exists():
            with open(path, "r") as f:
                data = yaml.safe_load(f) or {}

        data = cls._apply_env_overrides(data)

        return cls(**data)

    @staticmethod
    def _apply_env_overrides(data: dict) -> dict:
        """Apply environment variable overrides to config data."""
        env_mappings = {
            "PAPERDOLL_ASSET_ROOTS": ("assets", "roots"),
            "PAPERDOLL_ROOT_PRECEDENCE": ("assets", "root_precedence"),
            "LOG_LEVEL": ("debug", "log_level"),
            "ENVIRONMENT": ("debug", "environment"),
        }

        for env_var, (section, key) in env_mappings.items():
            value = os.environ.get(env_var)
            if value is not None:
                if section not in data:
                    data[section] = {}
                data[section][key] = value

        return data

    def save(self, path: Path) -> None:
        """Write this configuration to a YAML file."""
        data = self.model_dump()
        with open(path, "w") as f:
            yaml.dump(data, f, default_flow_style=False, sort_keys=False)


def get_config() -> PaperDollConfig:
    """Get the singleton configuration instance."""
    if not hasattr(get_config, "_instance"):
        get_config._instance = PaperDollConfig.from_yaml()
    return get_config._instance


def reload_config(path: Optional[Path] = None) -> PaperDollConfig:
    """Reload configuration from file."""
    get_config._instance = PaperDollConfig.from_yaml(path)
    return get_config._instance
