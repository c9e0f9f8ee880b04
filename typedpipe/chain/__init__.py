from typedpipe._src.chain.api import *
from typedpipe._src.chain.signature import *
from typedpipe._src.chain.validate import *

__all__ = [
    "Pipeline",
    "Chain",
    "pipe",
    "compose",
    "check_pipe",
    "check_compose",
    "repeat",
    "FunctionSignature",
    "ChainSignature",
    "signature_of",
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
