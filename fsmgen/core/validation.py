# fsmgen/core/validation.py
# Copyright (c) 2024 Brad Edwards
# Licensed under the MIT License - see LICENSE file for details
import logging
from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, Dict, List, NamedTuple, Optional, Set, Tuple

from fsmgen.core.config import CompilerConfig
from fsmgen.core.errors import DanglingReferenceError, ReservedEventError, ValidationError
from fsmgen.core.machine import MachineDefinition
from fsmgen.core.ordering import ordered_names
from fsmgen.core.types import EventName, StateName

logger = logging.getLogger(__name__)


class ValidationSeverity(Enum):
    """
    Severity levels for validation results.

    Higher values indicate higher severity:
    ERROR = 3 (highest)
    WARNING = 2
    INFO = 1 (lowest)
    """

    ERROR = 3
    WARNING = 2
    INFO = 1


class ValidationResult(NamedTuple):
    severity: ValidationSeverity
    rule: str
    message: str
    context: Dict[str, Any]


class ValidationContext:
    """
    Context object passed to validation rules.

    Attributes:
        definition: The machine under validation
        config: Active compiler configuration
        current_results: Validation results collected so far
    """

    def __init__(self, definition: MachineDefinition, config: CompilerConfig) -> None:
        self.definition = definition
        self.config = config
        self.current_results: List[ValidationResult] = []
        self._rule = ""

    def add_result(self, severity: ValidationSeverity, message: str, context: Optional[Dict[str, Any]] = None) -> None:
        """
        Add a validation result for the rule currently running.

        Args:
            severity: Severity level of the result
            message: Description of the validation result
            context: Optional additional context information
        """
        self.current_results.append(ValidationResult(severity, self._rule, message, context or {}))

    def state_exists(self, name: StateName) -> bool:
        return name in self.definition.states


@dataclass(frozen=True)
class ValidationRule:
    """
    Immutable container for a validation rule.

    Attributes:
        name: Unique identifier for the rule
        check: Callable returning True when the definition satisfies the rule
        severity: How severe violations of this rule are
        description: Human-readable description of what the rule checks
    """

    name: str
    check: Callable[[ValidationContext], bool]
    severity: ValidationSeverity
    description: str


class Validator:
    """
    Checks graph-level invariants of a built machine definition.

    Validation is purely structural. Reachability from a start state is not
    checked: the declaration has no start state, so unreachable states only
    produce INFO results.

    Runtime Invariants:
    - Rule names are unique
    - Rules run in registration order
    - Rules never modify the definition

    Example:
        validator = Validator()
        validator.add_rule(
            "has_terminal",
            lambda ctx: bool(ctx.definition.terminal_states),
            ValidationSeverity.WARNING,
            "Machine should declare a terminal state",
        )
        validator.validate(definition)
    """

    def __init__(self, config: Optional[CompilerConfig] = None) -> None:
        self._config = config or CompilerConfig()
        self._rules: Dict[str, ValidationRule] = {}
        self._register_default_rules()

    @property
    def rules(self) -> List[ValidationRule]:
        return list(self._rules.values())

    def add_rule(
        self,
        name: str,
        check: Callable[[ValidationContext], bool],
        severity: ValidationSeverity,
        description: str,
    ) -> None:
        """
        Add a custom validation rule.

        Raises:
            ValueError: If the name is already registered
            TypeError: If severity is not a ValidationSeverity enum value
        """
        if not isinstance(severity, ValidationSeverity):
            raise TypeError(f"severity must be a ValidationSeverity enum value, got {type(severity)}")
        if name in self._rules:
            raise ValueError(f"Duplicate rule name: {name}")
        self._rules[name] = ValidationRule(name, check, severity, description)

    def validate_results(self, definition: MachineDefinition) -> List[ValidationResult]:
        """
        Run every rule and return all results without raising.

        A rule returning False without reporting anything gets a generic result
        at the rule's severity.
        """
        context = ValidationContext(definition, self._config)
        for rule in self._rules.values():
            context._rule = rule.name
            before = len(context.current_results)
            if not rule.check(context) and len(context.current_results) == before:
                context.add_result(rule.severity, f"Validation failed: {rule.description}")
        return context.current_results

    def validate(self, definition: MachineDefinition) -> None:
        """
        Validate the definition, raising on the first failing ERROR rule.

        :raises DanglingReferenceError: If an event targets an undeclared state.
        :raises ReservedEventError: If a state declares the reserved event.
        :raises ValidationError: If a custom ERROR rule fails.
        """
        results = self.validate_results(definition)
        for result in results:
            level = logging.INFO if result.severity is ValidationSeverity.INFO else logging.WARNING
            if result.severity is not ValidationSeverity.ERROR:
                logger.log(level, f"{definition.machine_name}: {result.message}")

        for rule in self._rules.values():
            errors = [r for r in results if r.rule == rule.name and r.severity is ValidationSeverity.ERROR]
            if errors:
                raise self._error_for(rule, errors, definition)
        logger.debug(f"Machine {definition.machine_name} passed {len(self._rules)} validation rules")

    def _error_for(
        self, rule: ValidationRule, errors: List[ValidationResult], definition: MachineDefinition
    ) -> ValidationError:
        if rule.name == "destinations_declared":
            violations = [(r.context["state"], r.context["destination"], r.context["events"]) for r in errors]
            first_state = definition.states.get(violations[0][0])
            position = first_state.position if first_state else definition.position
            return DanglingReferenceError(violations, position)
        if rule.name == "reserved_event_absent":
            state = definition.states[errors[0].context["state"]]
            return ReservedEventError(state.name, self._config.reserved_event, state.position)
        return ValidationError("; ".join(r.message for r in errors), definition.position)

    def _register_default_rules(self) -> None:
        self.add_rule(
            "destinations_declared",
            self._check_destinations_declared,
            ValidationSeverity.ERROR,
            "All event destinations must be declared states",
        )
        self.add_rule(
            "reserved_event_absent",
            self._check_reserved_event_absent,
            ValidationSeverity.ERROR,
            "The reserved event must not be declared",
        )
        self.add_rule(
            "unreachable_states",
            self._check_incoming_edges,
            ValidationSeverity.INFO,
            "States without incoming transitions",
        )

    @staticmethod
    def _check_destinations_declared(context: ValidationContext) -> bool:
        violations = dangling_references(context.definition)
        for state, destination, events in violations:
            context.add_result(
                ValidationSeverity.ERROR,
                f"({state}) -{list(events)}-> ({destination}): no such destination state",
                {"state": state, "destination": destination, "events": events},
            )
        return not violations

    @staticmethod
    def _check_reserved_event_absent(context: ValidationContext) -> bool:
        reserved = context.config.reserved_event
        ok = True
        for state in context.definition:
            if reserved in state.events:
                ok = False
                context.add_result(
                    ValidationSeverity.ERROR,
                    f"event `{reserved}` is reserved by system (state `{state.name}`)",
                    {"state": state.name},
                )
        return ok

    @staticmethod
    def _check_incoming_edges(context: ValidationContext) -> bool:
        targeted: Set[StateName] = set()
        for state in context.definition:
            targeted.update(dst for dst in state.destinations if dst != state.name)
        orphans = [name for name in ordered_names(context.definition.states) if name not in targeted]
        for name in orphans:
            context.add_result(
                ValidationSeverity.INFO,
                f"state `{name}` has no incoming transitions",
                {"state": name},
            )
        return not orphans


def dangling_references(definition: MachineDefinition) -> List[Tuple[StateName, StateName, Tuple[EventName, ...]]]:
    """List every ``(state, destination, events)`` whose destination is undeclared."""
    return [
        (state.name, destination, tuple(events))
        for state in definition
        for destination, events in state.destinations.items()
        if destination not in definition.states
    ]
