"""
Emitters for validated machine definitions.

- description: Graphviz description of the machine
- code: logical structure of the generated artifact
- python: renderer turning that structure into a Python module
"""

from .code import EventConstant, EventEnumeration, GeneratedMachine, HandlerContract, StateConstant, emit_machine
from .description import describe_machine
from .python import PythonRenderer

__all__ = [
    "describe_machine",
    "emit_machine",
    "PythonRenderer",
    "GeneratedMachine",
    "StateConstant",
    "EventConstant",
    "EventEnumeration",
    "HandlerContract",
]
