# fsmgen/core/config.py
# Copyright (c) 2024 Brad Edwards
# Licensed under the MIT License - see LICENSE file for details
"""
Compiler configuration.

Defaults can be overridden from a ``[tool.fsmgen]`` table in ``pyproject.toml``
and then from command line flags.
"""

from __future__ import annotations

import dataclasses
import logging
import tomllib
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Mapping, Optional, Union

from fsmgen.core.errors import ConfigError

logger = logging.getLogger(__name__)

DECLARATION_SUFFIX = "Declaration"
RESERVED_EVENT = "Noop"


@dataclass(frozen=True)
class CompilerConfig:
    """
    Immutable settings shared by every stage of one compilation run.

    Attributes:
        declaration_suffix: Suffix every requested type name must carry
        min_type_name_length: Minimum length of a requested type name
        min_event_name_length: Minimum length of an event name in an annotation
        reserved_event: Event name produced by generated code for "no transition"
        output_extension: Extension of generated files (``<machine>.fsm.<ext>``)
    """

    declaration_suffix: str = DECLARATION_SUFFIX
    min_type_name_length: int = 12
    min_event_name_length: int = 2
    reserved_event: str = RESERVED_EVENT
    output_extension: str = "py"

    def __post_init__(self) -> None:
        if not self.declaration_suffix:
            raise ConfigError("declaration_suffix must not be empty")
        if self.min_type_name_length <= len(self.declaration_suffix):
            raise ConfigError(
                f"min_type_name_length must exceed the suffix length ({len(self.declaration_suffix)}), "
                f"got {self.min_type_name_length}"
            )
        if self.min_event_name_length < 1:
            raise ConfigError(f"min_event_name_length must be positive, got {self.min_event_name_length}")
        if not self.reserved_event.isidentifier():
            raise ConfigError(f"reserved_event must be an identifier, got {self.reserved_event!r}")
        if not self.output_extension or "." in self.output_extension:
            raise ConfigError(f"invalid output_extension {self.output_extension!r}")

    @classmethod
    def from_mapping(cls, values: Mapping[str, Any]) -> "CompilerConfig":
        """
        Build a config from a plain mapping, rejecting unknown keys.

        Keys may use dashes (TOML style) or underscores.

        :param values: Mapping of option names to values.
        :raises ConfigError: If a key is unknown or a value has the wrong type.
        """
        known = {f.name: f for f in dataclasses.fields(cls)}
        kwargs = {}
        for key, value in values.items():
            name = key.replace("-", "_")
            if name not in known:
                raise ConfigError(f"unknown configuration key {key!r}")
            expected = type(known[name].default)
            if not isinstance(value, expected) or isinstance(value, bool):
                raise ConfigError(f"configuration key {key!r} must be {expected.__name__}, got {value!r}")
            kwargs[name] = value
        return cls(**kwargs)

    def merged(self, **overrides: Any) -> "CompilerConfig":
        """Return a copy with the non-None overrides applied."""
        changes = {k: v for k, v in overrides.items() if v is not None}
        if not changes:
            return self
        try:
            return dataclasses.replace(self, **changes)
        except TypeError as e:
            raise ConfigError(str(e)) from e


def load_config(path: Optional[Union[str, Path]] = None) -> CompilerConfig:
    """
    Load configuration from the ``[tool.fsmgen]`` table of a pyproject file.

    A missing file or missing table yields the defaults.

    :param path: Path to ``pyproject.toml``; None means defaults only.
    :raises ConfigError: If the file is not valid TOML or the table is invalid.
    """
    if path is None:
        return CompilerConfig()
    path = Path(path)
    if not path.is_file():
        logger.debug(f"No configuration file at {path}, using defaults")
        return CompilerConfig()
    try:
        with path.open("rb") as f:
            document = tomllib.load(f)
    except (OSError, tomllib.TOMLDecodeError) as e:
        raise ConfigError(f"can't read configuration file {path}: {e}") from e
    table = document.get("tool", {}).get("fsmgen", {})
    if not isinstance(table, dict):
        raise ConfigError(f"[tool.fsmgen] in {path} must be a table")
    logger.debug(f"Loaded configuration from {path}: {table}")
    return CompilerConfig.from_mapping(table)
