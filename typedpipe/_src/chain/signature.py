""" Static call signatures of python callables. """

import functools
import inspect
import logging
import typing
from collections.abc import Callable
from dataclasses import dataclass
from typing import Any

from typeguard import typeguard_ignore

from typedpipe._src.util.typecheck import format_type

__all__ = ["FunctionSignature", "ChainSignature", "signature_of"]

logger = logging.getLogger(__name__)

_VARIADIC = (inspect.Parameter.VAR_POSITIONAL, inspect.Parameter.VAR_KEYWORD)

# stands in for callables that cannot be inspected
_UNDEFINED_PARAMETERS = (
    inspect.Parameter(
        "args", kind=inspect.Parameter.VAR_POSITIONAL, annotation=Any
    ),
    inspect.Parameter(
        "kwargs", kind=inspect.Parameter.VAR_KEYWORD, annotation=Any
    ),
)


def _render(
    parameters: tuple[inspect.Parameter, ...], return_type: Any
) -> str:
    sig = inspect.Signature(parameters)
    return f"{sig} -> {format_type(return_type)}"


@dataclass(frozen=True)
class FunctionSignature:
    """Parameters and return type of a single function in a chain."""

    name: str
    parameters: tuple[inspect.Parameter, ...]
    return_type: Any
    opaque: bool = False

    @property
    def required(self) -> tuple[inspect.Parameter, ...]:
        """parameters a caller has to supply"""
        return tuple(
            p
            for p in self.parameters
            if p.kind not in _VARIADIC and p.default is p.empty
        )

    @property
    def arity(self) -> int:
        return len(self.required)

    @property
    def accepts_single_argument(self) -> bool:
        if self.opaque:
            return True
        return (
            self.arity == 1
            and self.required[0].kind is not inspect.Parameter.KEYWORD_ONLY
        )

    @property
    def input_type(self) -> Any:
        """annotation of the parameter receiving a piped value"""
        if self.opaque or not self.required:
            return Any
        return self.required[0].annotation

    def __str__(self) -> str:
        return f"{self.name}{_render(self.parameters, self.return_type)}"


@dataclass(frozen=True)
class ChainSignature:
    """Externally visible signature of a validated chain."""

    parameters: tuple[inspect.Parameter, ...]
    return_type: Any

    def to_inspect(self) -> inspect.Signature:
        return inspect.Signature(
            self.parameters, return_annotation=self.return_type
        )

    def __str__(self) -> str:
        return _render(self.parameters, self.return_type)


def _name_of(fn: Callable[..., Any]) -> str:
    return getattr(fn, "__name__", None) or repr(fn)


def _type_hints(fn: Callable[..., Any]) -> dict[str, Any]:
    target = inspect.unwrap(fn)
    while isinstance(target, functools.partial):
        target = target.func
    if inspect.isclass(target):
        target = target.__init__
    elif not (inspect.isfunction(target) or inspect.ismethod(target)):
        target = getattr(type(target), "__call__", target)
    try:
        return typing.get_type_hints(target, include_extras=True)
    except (NameError, TypeError, AttributeError, SyntaxError) as e:
        logger.debug("could not resolve type hints of %r: %s", fn, e)
        return {}


def _resolve(annotation: Any, name: str, hints: dict[str, Any]) -> Any:
    if not isinstance(annotation, str):
        return annotation
    resolved = hints.get(name, annotation)
    if isinstance(resolved, str):
        logger.debug("unresolved annotation %r of %s", annotation, name)
        return Any
    return resolved


# non-callables are reported below, not by the strict-typing hook
@typeguard_ignore
def signature_of(fn: Callable[..., Any]) -> FunctionSignature:
    """extracts the static signature of `fn`

    String annotations are evaluated where possible. Callables without
    an inspectable signature are returned as opaque signatures that
    accept anything and return `Any`.
    """
    if not callable(fn):
        raise TypeError(f"{fn!r} is not callable")
    name = _name_of(fn)
    try:
        sig = inspect.signature(fn)
    except (ValueError, TypeError):
        logger.debug("no signature found for %s, treating it as opaque", name)
        return_type = fn if inspect.isclass(fn) else Any
        return FunctionSignature(
            name, _UNDEFINED_PARAMETERS, return_type, opaque=True
        )

    hints = _type_hints(fn)
    parameters = tuple(
        p.replace(annotation=_resolve(p.annotation, p.name, hints))
        for p in sig.parameters.values()
    )
    if inspect.isclass(fn):
        return_type = fn
    else:
        return_type = _resolve(sig.return_annotation, "return", hints)
    return FunctionSignature(name, parameters, return_type)
