"""Execution - run planned modules against a shared context."""

from .initializer import Initializer, InitState

__all__ = [
    "Initializer",
    "InitState",
]
