"""fsmgen: compiler from annotated declaration classes to typed finite state machines

A declaration is a class named ``<Machine>Declaration`` with one annotated
field per state. Each annotation lists the state's events and their
destinations::

    class CBMDeclaration:
        Opened: Annotated[FSMState, 'Try:"HalfOpened"']
        HalfOpened: Annotated[FSMState, 'Success:"Closed",Failure:"Opened"']
        Closed: Annotated[FSMState, 'Failure:"Opened",Panic:"Terminal",Error:"Terminal"']
        Terminal: FSMState

Responsibilities:
    - Extracting states from a declaration
    - Parsing annotations into per-state transitions
    - Building and validating the transition graph
    - Emitting a Graphviz description and a typed Python module

Interactions:
    - Introspection backends (source scanning, runtime reflection)
    - Renderers for the generated artifact
    - Command line and file system through thin wrappers

Cross-cutting Concerns:
    Error Handling:
        - Structured error hierarchy rooted at FSMGenError
        - Every error carries the offending names and a source position
        - All errors are fatal; no partial artifact is produced

    Logging:
        - Standard library logging, one logger per module
        - Verbose mode logs the machine description

    Determinism:
        - States and events are enumerated in lexicographic order
        - Identical input yields byte-identical output
"""

__version__ = "0.1.0"

from .compiler import CompilationResult, build_definition, compile_class, compile_declaration
from .core.config import CompilerConfig, load_config
from .core.errors import FSMGenError

__all__ = [
    "__version__",
    "CompilationResult",
    "CompilerConfig",
    "FSMGenError",
    "build_definition",
    "compile_class",
    "compile_declaration",
    "load_config",
]
