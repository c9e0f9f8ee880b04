import importlib
import logging
import os
import pathlib
import subprocess
import sys

import pytest

import typedpipe


@pytest.fixture
def reload_package(monkeypatch):
    yield lambda: importlib.reload(typedpipe)
    monkeypatch.delenv("TYPEDPIPE_STRICT_TYPING", raising=False)
    importlib.reload(typedpipe)


def test_strict_typing_is_off_by_default(monkeypatch, reload_package):
    monkeypatch.delenv("TYPEDPIPE_STRICT_TYPING", raising=False)
    reload_package()
    assert not typedpipe.use_strict_typing


@pytest.mark.parametrize("value", ["1", "true", "T"])
def test_strict_typing_from_environment(
    monkeypatch, caplog, reload_package, value
):
    monkeypatch.setenv("TYPEDPIPE_STRICT_TYPING", value)
    with caplog.at_level(logging.WARNING, logger="typedpipe"):
        reload_package()
    assert typedpipe.use_strict_typing
    assert "using typedpipe with strict typing" in caplog.text


def test_reload_keeps_the_public_api(reload_package):
    reload_package()
    assert typedpipe.pipe(len)("abc") == 3
    assert isinstance(typedpipe.compose(len), typedpipe.Pipeline)


STRICT_SCRIPT = """
import typedpipe
from typeguard import TypeCheckError
from typedpipe.chain import Chain, ChainTypeError, InvalidFunctionArity
from typedpipe.chain import check_link, pipe, repeat, signature_of

def inc(n: int) -> int:
    return n + 1

def add(a: int, b: int) -> int:
    return a + b

def scale(*, factor: int) -> int:
    return factor

assert typedpipe.use_strict_typing

def rejection(build):
    try:
        build()
    except TypeError as exc:
        return exc
    raise AssertionError("chain was accepted")

error = rejection(lambda: pipe(inc, add))
assert isinstance(error, ChainTypeError), repr(error)
assert error.error == InvalidFunctionArity(2, 2)

error = rejection(lambda: pipe(inc, scale))
assert error.error == InvalidFunctionArity(2, 0)

error = rejection(lambda: Chain(inc).then(add))
assert error.error == InvalidFunctionArity(2, 2)

error = rejection(lambda: repeat(add, 2))
assert error.error == InvalidFunctionArity(2, 2)

error = rejection(lambda: pipe(inc, 3))
assert not isinstance(error, ChainTypeError)
assert "is not callable" in str(error)

assert pipe(inc, inc)(1) == 3

# the hook is active for the rest of the package
try:
    check_link(int, "inc", 2)
except TypeCheckError:
    pass
else:
    raise AssertionError("strict typing is not installed")
"""


def test_strict_typing_leaves_rejections_to_the_validator():
    root = pathlib.Path(__file__).resolve().parents[1]
    env = dict(os.environ, TYPEDPIPE_STRICT_TYPING="1")
    env["PYTHONPATH"] = os.pathsep.join(
        filter(None, [str(root), env.get("PYTHONPATH")])
    )
    result = subprocess.run(
        [sys.executable, "-c", STRICT_SCRIPT],
        env=env,
        capture_output=True,
        text=True,
    )
    assert result.returncode == 0, result.stderr
