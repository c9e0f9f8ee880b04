""" Unchecked binary combinators. """

from collections.abc import Callable
from typing import ParamSpec, TypeVar

P = ParamSpec("P")
B = TypeVar("B")
C = TypeVar("C")

__all__ = ["pipe2", "compose2"]


def pipe2(f: Callable[P, B], g: Callable[[B], C]) -> Callable[P, C]:
    """feeds the result of `f` into `g`"""

    def piped(*args: P.args, **kwargs: P.kwargs) -> C:
        return g(f(*args, **kwargs))

    return piped


def compose2(f: Callable[[B], C], g: Callable[P, B]) -> Callable[P, C]:
    """applies `f` after `g`"""
    return pipe2(g, f)
