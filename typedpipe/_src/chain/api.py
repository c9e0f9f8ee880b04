""" This module contains the api for constructing checked pipelines. """

import copy
import inspect
from collections.abc import Callable, Iterator
from dataclasses import dataclass
from typing import Any, Generic, ParamSpec, TypeVar, cast

from typeguard import typeguard_ignore

from typedpipe._src.chain.signature import (
    ChainSignature,
    FunctionSignature,
    signature_of,
)
from typedpipe._src.chain.validate import (
    ChainTypeError,
    ValidationResult,
    check_link,
    validate_chain,
)

P = ParamSpec("P")
T = TypeVar("T")
Output = TypeVar("Output")

__all__ = [
    "Pipeline",
    "Chain",
    "pipe",
    "compose",
    "check_pipe",
    "check_compose",
    "repeat",
]


def _name_of(fn: Callable[..., Any]) -> str:
    return getattr(fn, "__name__", None) or repr(fn)


@dataclass(frozen=True, repr=False)
class Pipeline(Generic[P, Output]):
    """A validated sequence of functions in data-flow order.

    Calling a pipeline calls the first function with all arguments and
    feeds each result into the next function.
    """

    fns: tuple[Callable[..., Any], ...]
    signature: ChainSignature

    def __call__(self, *args: P.args, **kwargs: P.kwargs) -> Output:
        head, *tail = self.fns
        accum = head(*args, **kwargs)
        for fn in tail:
            accum = fn(accum)
        return cast(Output, accum)

    @property
    def __signature__(self) -> inspect.Signature:
        return self.signature.to_inspect()

    def flatten(self) -> Iterator[Callable[..., Any]]:
        """flattens nested pipelines into one iterator of functions"""
        for fn in self.fns:
            if isinstance(fn, Pipeline):
                yield from fn.flatten()
            else:
                yield fn

    def __len__(self) -> int:
        return len(self.fns)

    def __repr__(self) -> str:
        return f"pipe({', '.join(map(_name_of, self.fns))})"


# links are checked by validate_chain, not by the strict-typing hook
@typeguard_ignore
def check_pipe(*fns: Callable[..., Any]) -> ValidationResult:
    """validates `fns` in declaration order without raising"""
    return validate_chain([signature_of(fn) for fn in fns])


@typeguard_ignore
def check_compose(*fns: Callable[..., Any]) -> ValidationResult:
    """validates `fns` in reversed declaration order without raising"""
    return check_pipe(*reversed(fns))


@typeguard_ignore
def pipe(
    f: Callable[P, Any], /, *fs: Callable[[Any], Any]
) -> Pipeline[P, Any]:
    """pipes functions from left to right

    Raises `ChainTypeError` if some function cannot consume the result
    of its predecessor.
    """
    fns = (f, *fs)
    signature = check_pipe(*fns).unwrap()
    return Pipeline(fns, signature)


@typeguard_ignore
def compose(*fns: Callable[..., Any]) -> Pipeline[..., Any]:
    """composes functions, the last one is applied first"""
    if not fns:
        raise ValueError("Need at least one function!")
    return pipe(*reversed(fns))


@typeguard_ignore
def repeat(fn: Callable[[T], T], nreps: int = 1) -> Pipeline[[T], T]:
    """pipes `fn` into itself `nreps` times"""
    if nreps < 1:
        raise ValueError(f"Need at least one repetition, got {nreps}!")
    return pipe(*(fn,) * nreps)


class Chain(Generic[P, Output]):
    """Builds a pipeline one function at a time.

    Every call to `then` checks the new function against the output
    of the chain so far and returns a new chain.
    """

    @typeguard_ignore
    def __init__(self, fn: Callable[P, Output]):
        self._fns: tuple[Callable[..., Any], ...] = (fn,)
        self._head: FunctionSignature = signature_of(fn)
        self._last: FunctionSignature = self._head

    @typeguard_ignore
    def then(self, fn: Callable[[Output], T]) -> "Chain[P, T]":
        link = signature_of(fn)
        error = check_link(self._last.return_type, link, len(self) + 1)
        if error is not None:
            raise ChainTypeError(error)
        chain = copy.copy(self)
        chain._fns = (*self._fns, fn)
        chain._last = link
        return cast("Chain[P, T]", chain)

    @property
    def signature(self) -> ChainSignature:
        return ChainSignature(self._head.parameters, self._last.return_type)

    def build(self) -> Pipeline[P, Output]:
        return Pipeline(self._fns, self.signature)

    def __len__(self) -> int:
        return len(self._fns)

    def __repr__(self) -> str:
        return f"Chain({', '.join(map(_name_of, self._fns))})"
