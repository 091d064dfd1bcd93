# tests/integration/test_scenarios.py
# Copyright (c) 2024 Brad Edwards
# Licensed under the MIT License - see LICENSE file for details
"""End-to-end compilation of declaration sources."""
import pytest

from fsmgen.cli import main
from fsmgen.compiler import compile_class, compile_declaration
from fsmgen.core.errors import DanglingReferenceError, DuplicateEventError, NamingPolicyError
from fsmgen.introspection.source import SourceScanner

pytestmark = pytest.mark.integration


class CircuitBreaker:
    """Handler driving the circuit breaker from Opened to Terminal."""

    def __init__(self, module):
        self.module = module
        self.visited = []

    def operate_opened(self):
        self.visited.append("Opened")
        return self.module.CBMOpenedEvent.Try

    def operate_half_opened(self):
        self.visited.append("HalfOpened")
        return self.module.CBMHalfOpenedEvent.Success

    def operate_closed(self):
        self.visited.append("Closed")
        return self.module.CBMClosedEvent.Panic


class TestCircuitBreaker:
    def test_compiles(self, source_dir):
        result = compile_declaration(SourceScanner(source_dir).find("CBMDeclaration"))
        assert result.definition.terminal_states == ["Terminal"]
        assert result.description.count("[label=") == 6
        assert result.description.count("[shape=Msquare]") == 1
        assert "\tTerminal [shape=Msquare];" in result.description

    def test_generated_module_runs(self, source_dir, load_generated):
        assert main(["-type", "CBMDeclaration", "-dir", str(source_dir)]) == 0
        module = load_generated((source_dir / "cbm.fsm.py").read_text(encoding="utf-8"), "cbm_fsm")

        machine = module.CBM.from_string("Opened")
        handler = CircuitBreaker(module)
        assert machine.operate(handler) is module.CBMState.Terminal
        assert handler.visited == ["Opened", "HalfOpened", "Closed"]

    def test_regeneration_is_identical(self, source_dir):
        assert main(["-type", "CBMDeclaration", "-dir", str(source_dir)]) == 0
        first = (source_dir / "cbm.fsm.py").read_bytes()
        assert main(["-type", "CBMDeclaration", "-dir", str(source_dir)]) == 0
        assert (source_dir / "cbm.fsm.py").read_bytes() == first


class TestRejectedDeclarations:
    def test_dangling_reference(self, write_source, tmp_path):
        write_source(
            "dangling.py",
            """
            from typing import Annotated


            class CBMDeclaration:
                Opened: Annotated[int, 'Try:"HalfOpened"']
                HalfOpened: Annotated[int, 'Success:"Closed",Zz:"Fourth"']
                Closed: int
            """,
        )
        with pytest.raises(DanglingReferenceError) as exc_info:
            compile_declaration(SourceScanner(tmp_path).find("CBMDeclaration"))
        error = exc_info.value
        assert (error.state, error.events, error.destination) == ("HalfOpened", ("Zz",), "Fourth")
        assert "(HalfOpened) -[Zz]-> (Fourth)" in str(error)
        assert error.position.line == 7

    def test_duplicate_event(self, write_source, tmp_path):
        write_source(
            "duplicate.py",
            """
            from typing import Annotated


            class PairDeclaration:
                First: Annotated[int, 'Aa:"Second",Aa:"Third"']
                Second: int
                Third: int
            """,
        )
        with pytest.raises(DuplicateEventError) as exc_info:
            compile_declaration(SourceScanner(tmp_path).find("PairDeclaration"))
        assert (exc_info.value.state, exc_info.value.event) == ("First", "Aa")

    def test_naming_policy_before_parsing(self, make_declaration):
        declaration = make_declaration("Foo", [("First", "not an annotation")])
        with pytest.raises(NamingPolicyError) as exc_info:
            compile_declaration(declaration)
        assert exc_info.value.type_name == "Foo"

    def test_naming_policy_before_scanning(self, write_source, tmp_path):
        write_source("unparsable.py", "class Foo(:\n")
        assert main(["-type", "Foo", "-dir", str(tmp_path)]) == 1
        assert sorted(p.name for p in tmp_path.iterdir()) == ["unparsable.py"]


JOB_SOURCE = """
from typing import Annotated


class JobDeclaration:
    Idle: Annotated[int, 'Start:"Busy"']
    Busy: Annotated[int, 'Finish:"Done",Fail:"Idle"']
    Done: int
    retries = 3
    timeout: float = 1.5

    def describe(self):
        return "job"
"""


class TestBackendsAgree:
    def test_source_and_runtime_build_the_same_machine(self, write_source, tmp_path, load_generated):
        write_source("jobs.py", JOB_SOURCE)
        from_source = compile_declaration(SourceScanner(tmp_path).find("JobDeclaration"))

        module = load_generated(JOB_SOURCE, "jobs_declaration")
        from_runtime = compile_class(module.JobDeclaration, package=tmp_path.name)

        def shape(result):
            return {name: dict(state.events) for name, state in result.definition.states.items()}

        assert shape(from_source) == shape(from_runtime)
        assert list(from_source.definition.states) == ["Idle", "Busy", "Done", "timeout"]
        assert from_source.description == from_runtime.description
        assert from_source.source == from_runtime.source
