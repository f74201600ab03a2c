from __future__ import annotations

import tomllib
from pathlib import Path

import structlog
from pydantic import BaseModel, ConfigDict, Field, field_validator

CONFIG_FILENAME = "coverscope.toml"

logger = structlog.get_logger(__name__)


class CoverScopeConfig(BaseModel):
    """Configuration for building the structural index and resolving targets."""

    model_config = ConfigDict(extra="forbid")

    include: list[str] = Field(
        default_factory=list,
        description="Glob patterns for files to index (empty = all Python files)",
    )
    exclude: list[str] = Field(
        default_factory=list,
        description="Glob patterns for files to leave out of the index",
    )
    nested_gitignore: bool = Field(
        default=False,
        description="Compose nested .gitignore files (default: root only)",
    )
    trait_suffixes: list[str] = Field(
        default_factory=lambda: ["Mixin"],
        description="Base class name suffixes that mark a mixin as a trait",
    )
    interface_bases: list[str] = Field(
        default_factory=lambda: [
            "Protocol",
            "typing.Protocol",
            "typing_extensions.Protocol",
        ],
        description="Base classes that make a class an interface",
    )
    test_method_prefix: str = Field(
        default="test",
        description="Prefix of the methods that make up a test class's suite",
    )
    infer_class_under_test: bool = Field(
        default=False,
        description=(
            "Cover the class named after the test class (TestFoo/FooTest -> Foo) "
            "when no covers metadata is declared"
        ),
    )

    @field_validator("trait_suffixes", "interface_bases")
    @classmethod
    def reject_empty_names(cls, v: list[str]) -> list[str]:
        if any(not item.strip() for item in v):
            msg = "entries must be non-empty names"
            raise ValueError(msg)
        return v

    @field_validator("test_method_prefix")
    @classmethod
    def reject_empty_prefix(cls, v: str) -> str:
        if not v:
            msg = "test_method_prefix must be non-empty"
            raise ValueError(msg)
        return v


class ConfigError(Exception):
    """Raised when a config file exists but cannot be parsed or validated."""


def load_config(root: Path) -> CoverScopeConfig:
    """Load configuration from coverscope.toml if it exists."""
    config_path = Path(root) / CONFIG_FILENAME

    if not config_path.is_file():
        return CoverScopeConfig()

    try:
        with config_path.open("rb") as f:
            data = tomllib.load(f)
    except tomllib.TOMLDecodeError as e:
        msg = f"Invalid TOML in {config_path}: {e}"
        raise ConfigError(msg) from e

    try:
        config = CoverScopeConfig.model_validate(data)
    except Exception as e:
        msg = f"Invalid config in {config_path}: {e}"
        raise ConfigError(msg) from e

    logger.debug("config.loaded", path=str(config_path))
    return config
