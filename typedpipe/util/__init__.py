from typedpipe._src.util.func import *
from typedpipe._src.util.typecheck import *

__all__ = ["pipe2", "compose2", "is_assignable", "format_type", "normalize"]
