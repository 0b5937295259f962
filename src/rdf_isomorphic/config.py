"""
Configuration for isomorphism checks.

Provides:
- Hash primitive selection
- Bijection verification toggle
- Search budget limits
- Loading from dicts, JSON files, and environment variables
- Configuration validation
"""
from __future__ import annotations

import json
import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional

from rdf_isomorphic.isomorphism.context import SearchBudget
from rdf_isomorphic.isomorphism.hashing import (
    DEFAULT_HASH_ALGORITHM,
    HASH_FUNCTIONS,
    HashFunction,
    get_hash_function,
)

logger = logging.getLogger(__name__)

CONFIG_FILENAME = "isomorphism.json"
ENV_PREFIX = "RDF_ISOMORPHIC_"


class ConfigValidationError(Exception):
    """Configuration validation error."""
    pass


@dataclass
class IsomorphismConfig:
    """
    Settings for one isomorphism query.

    Attributes:
        hash_algorithm: Name of the hash primitive (sha1, md5, blake2b)
        verify_bijection: Check a candidate bijection against the quads
            before accepting it. When off, a complete hash-consistent pairing
            is accepted as is, and soundness rests on the hash primitive.
        max_depth: Limit on nested speculative pairings (None = unlimited)
        max_calls: Limit on solver invocations (None = unlimited)
        timeout_seconds: Wall-clock limit (None = unlimited)
    """
    hash_algorithm: str = DEFAULT_HASH_ALGORITHM
    verify_bijection: bool = True
    max_depth: Optional[int] = None
    max_calls: Optional[int] = None
    timeout_seconds: Optional[float] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "hash_algorithm": self.hash_algorithm,
            "verify_bijection": self.verify_bijection,
            "max_depth": self.max_depth,
            "max_calls": self.max_calls,
            "timeout_seconds": self.timeout_seconds,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "IsomorphismConfig":
        return cls(
            hash_algorithm=data.get("hash_algorithm", DEFAULT_HASH_ALGORITHM),
            verify_bijection=data.get("verify_bijection", True),
            max_depth=data.get("max_depth"),
            max_calls=data.get("max_calls"),
            timeout_seconds=data.get("timeout_seconds"),
        )

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "IsomorphismConfig":
        """
        Build a configuration from ``RDF_ISOMORPHIC_*`` environment variables.

        Malformed numeric values are logged and ignored.
        """
        env = os.environ if environ is None else environ
        config = cls()

        algorithm = env.get(f"{ENV_PREFIX}HASH")
        if algorithm:
            config.hash_algorithm = algorithm.strip().lower()

        verify = env.get(f"{ENV_PREFIX}VERIFY")
        if verify:
            config.verify_bijection = verify.strip().lower() not in ("0", "false", "no", "off")

        config.max_depth = _env_number(env, "MAX_DEPTH", int)
        config.max_calls = _env_number(env, "MAX_CALLS", int)
        config.timeout_seconds = _env_number(env, "TIMEOUT", float)
        return config

    def save(self, path: Path) -> None:
        """Save configuration to a directory."""
        config_file = path / CONFIG_FILENAME
        with open(config_file, "w", encoding="utf-8") as f:
            json.dump(self.to_dict(), f, indent=2)

    @classmethod
    def load(cls, path: Path) -> "IsomorphismConfig":
        """Load configuration from a directory, or defaults if none is saved."""
        config_file = path / CONFIG_FILENAME
        if config_file.exists():
            with open(config_file, "r", encoding="utf-8") as f:
                data = json.load(f)
            return cls.from_dict(data)
        return cls()

    def to_budget(self) -> SearchBudget:
        return SearchBudget(
            max_depth=self.max_depth,
            max_calls=self.max_calls,
            timeout_seconds=self.timeout_seconds,
        )

    def hash_function(self) -> HashFunction:
        return get_hash_function(self.hash_algorithm)


def _env_number(env: Mapping[str, str], name: str, cast):
    raw = env.get(f"{ENV_PREFIX}{name}")
    if raw is None or raw.strip() == "":
        return None
    try:
        return cast(raw)
    except ValueError:
        logger.warning(f"Ignoring malformed {ENV_PREFIX}{name}={raw!r}")
        return None


class ConfigValidator:
    """Validates isomorphism configuration."""

    @staticmethod
    def validate(config: IsomorphismConfig) -> List[str]:
        """
        Validate configuration.

        Returns list of error messages (empty if valid).
        """
        errors = []

        if config.hash_algorithm.lower() not in HASH_FUNCTIONS:
            errors.append(f"Invalid hash_algorithm: {config.hash_algorithm}")

        if config.max_depth is not None and config.max_depth < 0:
            errors.append("max_depth cannot be negative")

        if config.max_calls is not None and config.max_calls < 1:
            errors.append("max_calls must be at least 1")

        if config.timeout_seconds is not None and config.timeout_seconds <= 0:
            errors.append("timeout_seconds must be positive")

        return errors

    @staticmethod
    def validate_or_raise(config: IsomorphismConfig) -> None:
        """Validate configuration, raising on errors."""
        errors = ConfigValidator.validate(config)
        if errors:
            raise ConfigValidationError("; ".join(errors))
