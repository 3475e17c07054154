# Copyright (c) 2025 Kenneth Stott
#
# This source code is licensed under the Business Source License 1.1
# found in the LICENSE file in the root directory of this source tree.
#
# NOTICE: Use of this software for training artificial intelligence or
# machine learning models is strictly prohibited without explicit written
# permission from the copyright holder.

"""Configuration loading with Pydantic validation and env var substitution."""

import logging
import os
import re
from pathlib import Path
from typing import Any, Optional

import yaml
from pydantic import BaseModel, Field, ValidationError

from hostfacts.core.errors import ConfigurationError
from hostfacts.core.models import FactType


class ChunkOptions(BaseModel):
    """Options accepted when registering an aggregate chunk."""
    model_config = {"extra": "forbid"}

    require: list[str] = Field(default_factory=list)  # Names of chunks this one depends on


class AggregateOptions(BaseModel):
    """Options accepted by an aggregate resolution."""
    model_config = {"extra": "forbid"}

    name: Optional[str] = None
    timeout: Optional[float] = None  # Passed through to probes; the engine never enforces it
    weight: int = 0
    fact_type: FactType = FactType.CORE


def validate_options(model: type[BaseModel], options: dict[str, Any], owner: str) -> BaseModel:
    """Validate an options mapping, rejecting unknown keys.

    Args:
        model: Pydantic model describing the accepted options
        options: Raw options mapping
        owner: Name used in the error message (e.g. "Aggregate#chunk")

    Returns:
        Validated options model

    Raises:
        ConfigurationError: If options contain unknown keys or invalid values
    """
    try:
        return model.model_validate(options)
    except ValidationError as e:
        unexpected = sorted(
            str(err["loc"][0]) for err in e.errors() if err["type"] == "extra_forbidden"
        )
        if unexpected:
            raise ConfigurationError(
                f"Unexpected options passed to {owner}: {unexpected}"
            ) from e
        raise ConfigurationError(f"Invalid options passed to {owner}: {e}") from e


class EngineConfig(BaseModel):
    """Root configuration for the fact-resolution engine."""
    model_config = {"extra": "ignore"}

    log_level: str = "WARNING"
    os_release_path: str = "/etc/os-release"

    # Distribution release file read before os-release, e.g. /etc/gentoo-release
    release_file: Optional[str] = None
    release_regex: Optional[str] = None

    # Facts that are never resolved; they come back as null records
    blocked_facts: list[str] = Field(default_factory=list)

    # Memoize resolve_fact() results for the resolver lifetime
    cache_results: bool = True

    @classmethod
    def from_yaml(cls, path: str | Path) -> "EngineConfig":
        """
        Load config from YAML file with env var substitution.

        Args:
            path: Path to the config YAML file

        Returns:
            EngineConfig object
        """
        path = Path(path)
        if not path.exists():
            raise FileNotFoundError(f"Config file not found: {path}")

        with open(path) as f:
            raw_content = f.read()

        # Substitute environment variables: ${VAR_NAME}
        substituted = _substitute_env_vars(raw_content)

        data = yaml.safe_load(substituted) or {}
        return cls.model_validate(data)

    def is_blocked(self, fact_name: str) -> bool:
        """Check whether a fact (or one of its parent groups) is blocked."""
        return any(
            fact_name == blocked or fact_name.startswith(f"{blocked}.")
            for blocked in self.blocked_facts
        )


def _substitute_env_vars(content: str) -> str:
    """Replace ${VAR_NAME} with environment variable values."""
    pattern = re.compile(r'\$\{([^}]+)\}')

    def replacer(match: re.Match) -> str:
        var_name = match.group(1)
        value = os.environ.get(var_name)
        if value is None:
            raise ValueError(f"Environment variable not set: {var_name}")
        return value

    return pattern.sub(replacer, content)


def configure_logging(level: str | int = logging.WARNING) -> logging.Logger:
    """Attach a console handler to the package logger.

    Only adds a handler if one is not already configured, and prevents
    duplicate messages through the root logger.
    """
    package_logger = logging.getLogger("hostfacts")
    if not any(isinstance(h, logging.StreamHandler) for h in package_logger.handlers):
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter(
            '%(asctime)s - %(name)s - %(levelname)s - %(message)s'
        ))
        package_logger.addHandler(handler)
    package_logger.setLevel(level.upper() if isinstance(level, str) else level)
    package_logger.propagate = False
    return package_logger
