# fsmgen/core/naming.py
# Copyright (c) 2024 Brad Edwards
# Licensed under the MIT License - see LICENSE file for details
import keyword
import re
from typing import Iterable, List, Optional

from fsmgen.core.config import CompilerConfig
from fsmgen.core.errors import NamingPolicyError

_CAMEL_BOUNDARY = re.compile(r"(?<=[a-z0-9])(?=[A-Z])|(?<=[A-Z])(?=[A-Z][a-z])")

# Identifiers Enum refuses as member names beyond the _sunder_ and __dunder__ ones.
ENUM_RESERVED_NAMES = frozenset({"mro"})


def verify_type_names(type_names: Iterable[str], config: CompilerConfig) -> List[str]:
    """
    Check every requested type name against the declaration naming policy.

    Runs before any source is scanned or parsed.

    :param type_names: Names requested by the caller.
    :param config: Active compiler configuration.
    :return: The names, in the order given.
    :raises NamingPolicyError: On the first name that lacks the suffix or is too short.
    """
    names = list(type_names)
    for name in names:
        if not name.endswith(config.declaration_suffix) or len(name) < config.min_type_name_length:
            raise NamingPolicyError(
                name,
                f"unsupported type name. type name should have `{config.declaration_suffix}` suffix "
                f"and be at least {config.min_type_name_length} characters long. type: {name}",
            )
    return names


def machine_name_for(type_name: str, config: CompilerConfig) -> str:
    """Strip the declaration suffix: ``CBMDeclaration`` -> ``CBM``."""
    verify_type_names([type_name], config)
    return type_name[: -len(config.declaration_suffix)]


def snake_case(name: str) -> str:
    """``HalfOpened`` -> ``half_opened``; ``CBMState`` -> ``cbm_state``."""
    return _CAMEL_BOUNDARY.sub("_", name).lower()


def member_name_problem(name: str) -> Optional[str]:
    """
    Check that a state or event name can become a member of a generated enumeration.

    :param name: State or event name.
    :return: Why the name is unusable, or None when it is fine.
    """
    if not name.isidentifier() or keyword.iskeyword(name):
        return "is not a valid identifier"
    if name.startswith("_"):
        return "must not start with `_`"
    if name in ENUM_RESERVED_NAMES:
        return "is reserved by Enum"
    return None
