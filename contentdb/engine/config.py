"""
ContentDB Configuration — Load and validate contentdb.yaml, declare model configs.

Usage:
    from contentdb.engine.config import load_store_config, get_store_config, ModelConfig
"""

from __future__ import annotations

from pathlib import Path
from typing import List, Optional, Tuple

import yaml
from pydantic import BaseModel, ConfigDict, Field, field_validator

from contentdb.engine.errors import ContentDBConfigError

CONFIG_FILE_NAME = "contentdb.yaml"


# ---------------------------------------------------------------------------
# Pydantic models for contentdb.yaml
# ---------------------------------------------------------------------------

class LoggingConfig(BaseModel):
    level: str = "INFO"
    directory: str = ".contentdb/logs"
    enabled: bool = False

    @field_validator("level")
    @classmethod
    def validate_level(cls, v: str) -> str:
        v = v.upper()
        if v not in ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"):
            raise ValueError(f"level must be a logging level name, got '{v}'")
        return v


class StoreConfig(BaseModel):
    """Root model for contentdb.yaml."""
    base_path: str = ""
    content_extensions: List[str] = Field(
        default_factory=lambda: [".md", ".markdown", ".html"]
    )
    protected_attributes: List[str] = Field(default_factory=list)
    logging: LoggingConfig = LoggingConfig()

    @field_validator("content_extensions")
    @classmethod
    def validate_extensions(cls, v: List[str]) -> List[str]:
        for ext in v:
            if not ext.startswith("."):
                raise ValueError(f"content extensions must start with '.', got '{ext}'")
        return v


# ---------------------------------------------------------------------------
# Per-type model configuration
# ---------------------------------------------------------------------------

class ModelConfig(BaseModel):
    """
    Immutable configuration for one record type.

    Attached to a model class by @content_model / @datafile_model. An empty
    base_path defers to the store config's base_path at call time; an empty
    folder_path means the collection is the base path itself.
    """

    model_config = ConfigDict(frozen=True)

    base_path: str = ""
    folder_path: str = ""
    variables: Tuple[str, ...] = ()
    include_root: bool = False
    root_name: Optional[str] = None
    protected: Tuple[str, ...] = ()

    @field_validator("folder_path")
    @classmethod
    def validate_folder_path(cls, v: str) -> str:
        if ".." in v.split("/"):
            raise ValueError(f"folder_path may not contain '..', got '{v}'")
        return v.strip("/")

    @field_validator("variables")
    @classmethod
    def validate_variables(cls, v: Tuple[str, ...]) -> Tuple[str, ...]:
        for name in v:
            if not name.isidentifier():
                raise ValueError(f"variable names must be identifiers, got '{name}'")
        if len(set(v)) != len(v):
            raise ValueError(f"duplicate variable names in {list(v)}")
        return v

    def with_base_path(self, base_path: str) -> "ModelConfig":
        """Return a copy bound to another base path (e.g. a second site)."""
        return self.model_copy(update={"base_path": base_path})


# ---------------------------------------------------------------------------
# Config Loading Functions
# ---------------------------------------------------------------------------

_store_config: Optional[StoreConfig] = None


def _find_project_root() -> Path:
    """Find the project root by looking for contentdb.yaml."""
    current = Path.cwd()
    for parent in [current, *current.parents]:
        if (parent / CONFIG_FILE_NAME).exists():
            return parent
    return current


def load_store_config(config_path: Optional[str] = None) -> StoreConfig:
    """
    Load and validate contentdb.yaml.

    Args:
        config_path: Explicit path to contentdb.yaml. If None, auto-discovers.

    Returns:
        Validated StoreConfig instance.
    """
    global _store_config

    if config_path is None:
        root = _find_project_root()
        config_path = str(root / CONFIG_FILE_NAME)

    path = Path(config_path)
    if not path.exists():
        _store_config = StoreConfig()
        return _store_config

    with open(path, "r", encoding="utf-8") as f:
        try:
            raw = yaml.safe_load(f) or {}
        except yaml.YAMLError as e:
            raise ContentDBConfigError(
                f"Could not parse {path}: {e}", file_path=str(path)
            ) from e

    if not isinstance(raw, dict):
        raise ContentDBConfigError(
            f"{path} must contain a mapping", file_path=str(path)
        )

    # Relative base paths are relative to the config file's directory
    base_path = raw.get("base_path", "")
    if base_path and not Path(base_path).is_absolute():
        raw["base_path"] = str((path.parent / base_path).resolve())

    _store_config = StoreConfig(**raw)
    return _store_config


def get_store_config() -> StoreConfig:
    """Get the currently loaded store config, loading if necessary."""
    global _store_config
    if _store_config is None:
        _store_config = load_store_config()
    return _store_config


def reset_store_config() -> None:
    """Forget the cached store config."""
    global _store_config
    _store_config = None
