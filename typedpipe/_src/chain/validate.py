""" Pairwise validation of function chains.

A chain is given in data-flow order. The first function may take any
arguments, every later one has to accept exactly one argument whose type
admits the return type of its predecessor. Positions in diagnostics count
from 1 in data-flow order.
"""

import logging
from abc import ABC, abstractmethod
from collections.abc import Sequence
from dataclasses import dataclass
from typing import Any

from typedpipe._src.chain.signature import ChainSignature, FunctionSignature
from typedpipe._src.util.typecheck import format_type, is_assignable

__all__ = [
    "ChainError",
    "InvalidFunctionArity",
    "NonMatchingParameter",
    "ChainTypeError",
    "Ok",
    "Err",
    "ValidationResult",
    "check_link",
    "validate_chain",
]

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ChainError(ABC):
    """Diagnostic for the first malformed link of a chain."""

    position: int

    @property
    def kind(self) -> str:
        return type(self).__name__

    @property
    @abstractmethod
    def message(self) -> str:
        ...

    def __str__(self) -> str:
        return self.message


@dataclass(frozen=True)
class InvalidFunctionArity(ChainError):
    actual_arity: int

    @property
    def expected(self) -> int:
        return 1

    @property
    def actual(self) -> int:
        return self.actual_arity

    @property
    def message(self) -> str:
        return (
            "Expected only 1 argument for function with index "
            f"{self.position}, but got {self.actual_arity}"
        )


@dataclass(frozen=True)
class NonMatchingParameter(ChainError):
    expected: Any
    actual: Any

    @property
    def message(self) -> str:
        return (
            f"Expected parameter type '{format_type(self.expected)}' "
            f"of function with index {self.position} to match return "
            f"type '{format_type(self.actual)}' of previous one"
        )


class ChainTypeError(TypeError):
    """Raised when a chain is assembled from incompatible functions."""

    def __init__(self, error: ChainError):
        super().__init__(error.message)
        self.error = error


@dataclass(frozen=True)
class Ok:
    signature: ChainSignature

    def unwrap(self) -> ChainSignature:
        return self.signature


@dataclass(frozen=True)
class Err:
    error: ChainError

    @property
    def message(self) -> str:
        return self.error.message

    def unwrap(self) -> ChainSignature:
        raise ChainTypeError(self.error)


ValidationResult = Ok | Err


def check_link(
    incoming: Any, link: FunctionSignature, position: int
) -> ChainError | None:
    """checks whether `link` can consume a value of type `incoming`"""
    if not link.accepts_single_argument:
        # a lone keyword-only parameter cannot take a positional value
        arity = link.arity if link.arity != 1 else 0
        return InvalidFunctionArity(position, arity)
    if not is_assignable(incoming, link.input_type):
        return NonMatchingParameter(position, link.input_type, incoming)
    return None


def validate_chain(
    signatures: Sequence[FunctionSignature],
) -> ValidationResult:
    """validates a chain of signatures given in data-flow order"""
    if len(signatures) == 0:
        raise ValueError("Need at least one function!")
    head, *tail = signatures
    previous = head
    for position, link in enumerate(tail, start=2):
        error = check_link(previous.return_type, link, position)
        if error is not None:
            logger.debug("rejected chain at %s: %s", link.name, error)
            return Err(error)
        previous = link
    logger.debug("validated chain of %d functions", len(signatures))
    return Ok(ChainSignature(head.parameters, previous.return_type))
