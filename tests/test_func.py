import pytest

from typedpipe.util import compose2, pipe2


def inc(n: int) -> int:
    return n + 1


def shout(s: str) -> str:
    return s.upper()


def add(a: int, b: int) -> int:
    return a + b


def test_pipe2():
    assert pipe2(add, inc)(1, 2) == 4
    assert pipe2(add, inc)(a=1, b=2) == 4


def test_compose2():
    assert compose2(str, inc)(1) == "2"
    assert compose2(inc, add)(1, 2) == 4


def test_binary_combinators_are_unchecked():
    f = pipe2(inc, shout)
    with pytest.raises(AttributeError):
        f(1)
