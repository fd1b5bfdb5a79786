"""Validator configuration."""

from __future__ import annotations

import json
import logging
from dataclasses import asdict, dataclass, fields
from pathlib import Path
from typing import Any, Dict, Union

import yaml  # type: ignore[import-untyped]

from .exceptions import ConfigurationError
from .shapes import DEFAULT_TAG

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ValidatorConfig:
    """Settings for a ``Validator``.

    Attributes:
        tag: Dataclass metadata key holding field annotations
        check_types: Report leaf values whose runtime type does not match the
            declared field kind instead of evaluating constraints on them

    Example:
        ```yaml
        # validator.yaml
        tag: validate
        check_types: true
        ```
    """

    tag: str = DEFAULT_TAG
    check_types: bool = True

    def __post_init__(self) -> None:
        if not isinstance(self.tag, str) or not self.tag:
            raise ConfigurationError(
                "Validator tag must be a non-empty string",
                context={"tag": repr(self.tag)},
            )
        if not isinstance(self.check_types, bool):
            raise ConfigurationError(
                "check_types must be a boolean",
                context={"check_types": repr(self.check_types)},
            )

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> ValidatorConfig:
        """Create a config from a dictionary.

        Args:
            data: Configuration values

        Returns:
            ValidatorConfig instance

        Raises:
            ConfigurationError: If the dictionary has unknown keys or bad values
        """
        if not isinstance(data, dict):
            raise ConfigurationError(
                f"Validator configuration must be a mapping, got {type(data).__name__}"
            )
        known = {f.name for f in fields(cls)}
        unknown = sorted(set(data) - known)
        if unknown:
            raise ConfigurationError(
                f"Unknown validator configuration keys: {', '.join(unknown)}",
                context={"unknown": unknown, "known": sorted(known)},
            )
        return cls(**data)

    @classmethod
    def from_file(cls, path: Union[str, Path]) -> ValidatorConfig:
        """Load a config from a YAML or JSON file.

        Args:
            path: Path to a ``.yaml``, ``.yml`` or ``.json`` file

        Returns:
            ValidatorConfig instance

        Raises:
            ConfigurationError: If the file is missing, has an unsupported
                extension, or cannot be parsed
        """
        path = Path(path)
        if not path.exists():
            raise ConfigurationError(
                f"Configuration file not found: {path}", context={"path": str(path)}
            )

        suffix = path.suffix.lower()
        try:
            with open(path) as f:
                if suffix in [".yaml", ".yml"]:
                    data = yaml.safe_load(f)
                elif suffix == ".json":
                    data = json.load(f)
                else:
                    raise ConfigurationError(
                        f"Unsupported file format: {suffix}", context={"path": str(path)}
                    )
        except (yaml.YAMLError, json.JSONDecodeError) as e:
            raise ConfigurationError(
                f"Failed to parse configuration file {path}: {e}",
                context={"path": str(path)},
            ) from e

        logger.debug(f"Loaded validator configuration from {path}")
        return cls.from_dict(data or {})

    def to_dict(self) -> Dict[str, Any]:
        """Convert to a dictionary."""
        return asdict(self)


__all__ = ["ValidatorConfig"]
