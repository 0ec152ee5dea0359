"""Configuration for sorbet-docs runs."""

from pathlib import Path
from typing import Any, Literal, Self

import yaml
from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from sorbet_docs.errors import ConfigError


class SorbetDocsConfig(BaseModel):
    """Configuration for a documentation run with Pydantic validation.

    Immutable and strict: unknown keys are rejected so typos in a config file
    surface instead of being ignored.
    """

    model_config = ConfigDict(
        frozen=True,
        extra="forbid",
        validate_assignment=True,
    )

    file_extensions: list[str] = Field(
        default_factory=lambda: [".rb", ".rbi"],
        description="File extensions processed when walking directories",
        min_length=1,
    )
    max_file_size: int = Field(
        default=10 * 1024 * 1024,  # 10MB
        description="Skip files larger than this size in bytes",
        gt=0,
    )
    allow_duplicate_fields: bool = Field(
        default=True,
        description=(
            "Keep every `const`/`prop` declaration of a repeated field name in the "
            "constructor; when False, later duplicates are skipped"
        ),
    )
    markup: Literal["markdown", "rdoc"] = Field(
        default="markdown",
        description="Markup used to delimit names in generated docstrings",
    )

    @field_validator("file_extensions")
    @classmethod
    def normalise_extensions(cls, v: list[str]) -> list[str]:
        """Lowercase extensions and require the leading dot."""
        normalised: list[str] = []
        for extension in v:
            extension = extension.strip().lower()
            if not extension.startswith(".") or len(extension) < 2:
                raise ValueError(f"File extension must start with '.': {extension!r}")
            normalised.append(extension)
        return normalised

    def code_span(self, name: str) -> str:
        """Delimit a name as code in the configured markup."""
        return f"`{name}`" if self.markup == "markdown" else f"+{name}+"

    @classmethod
    def from_properties(cls, properties: dict[str, Any]) -> Self:
        """Create configuration from a properties dictionary.

        Args:
            properties: Raw configuration values

        Returns:
            Validated configuration object

        Raises:
            ConfigError: If validation fails

        """
        try:
            return cls.model_validate(properties)
        except ValidationError as e:
            raise ConfigError(f"Invalid sorbet-docs configuration: {e}") from e

    @classmethod
    def from_yaml(cls, config_path: Path) -> Self:
        """Load configuration from a YAML file.

        Raises:
            ConfigError: If the file cannot be read, parsed or validated

        """
        try:
            with open(config_path, encoding="utf-8") as f:
                properties = yaml.safe_load(f) or {}
        except yaml.YAMLError as e:
            raise ConfigError(f"Failed to parse YAML config {config_path}: {e}") from e
        except OSError as e:
            raise ConfigError(f"Failed to read config file {config_path}: {e}") from e

        if not isinstance(properties, dict):
            raise ConfigError(f"Invalid configuration format in {config_path}")
        return cls.from_properties(properties)  # type: ignore[arg-type]
