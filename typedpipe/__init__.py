import logging
import os

use_strict_typing = os.getenv("TYPEDPIPE_STRICT_TYPING", "False").lower() in (
    "true",
    "1",
    "t",
)

from typeguard import install_import_hook

if use_strict_typing:
    logging.getLogger(__name__).warning("using typedpipe with strict typing")

    with install_import_hook(["typedpipe"]):
        from . import chain, util
else:
    from . import chain, util

from .chain import (
    Chain,
    ChainError,
    ChainTypeError,
    Err,
    Ok,
    Pipeline,
    check_compose,
    check_pipe,
    compose,
    repeat,
    pipe,
)

__all__ = [
    "chain",
    "util",
    "Chain",
    "ChainError",
    "ChainTypeError",
    "Err",
    "Ok",
    "Pipeline",
    "check_compose",
    "check_pipe",
    "compose",
    "repeat",
    "pipe",
]
