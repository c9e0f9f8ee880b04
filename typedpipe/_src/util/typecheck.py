""" Static compatibility checks between type annotations. """

import collections.abc
import inspect
import types
import typing
from typing import Any, Literal, TypeVar, Union, get_args, get_origin

from typeguard import TypeCheckError, check_type
from typing_extensions import Never, get_protocol_members, is_protocol

__all__ = ["is_assignable", "format_type", "normalize"]

NoneType = type(None)

# implicit promotions of PEP 484's numeric tower
_PROMOTIONS: dict[type, tuple[type, ...]] = {
    float: (int,),
    complex: (int, float),
}

_BOTTOM = (typing.NoReturn, Never)

_EMPTY_TUPLES = (tuple[()], typing.Tuple[()])

# element types of builtin collections that are not generic
_ELEMENTS: dict[type, Any] = {str: str, bytes: int, bytearray: int, range: int}

# generic origins whose type arguments are read-only
_COVARIANT = frozenset(
    {
        tuple,
        frozenset,
        type,
        collections.abc.Iterable,
        collections.abc.Iterator,
        collections.abc.Reversible,
        collections.abc.Container,
        collections.abc.Collection,
        collections.abc.Sequence,
        collections.abc.Set,
        collections.abc.KeysView,
        collections.abc.ValuesView,
        collections.abc.ItemsView,
        collections.abc.Awaitable,
        collections.abc.AsyncIterable,
        collections.abc.AsyncIterator,
    }
)


def normalize(tp: Any) -> Any:
    """strips everything from an annotation that carries
    no information about subtyping"""
    if tp is inspect.Parameter.empty:
        return Any
    if isinstance(tp, (str, typing.ForwardRef)):
        return Any
    if tp is None:
        return NoneType
    if get_origin(tp) is typing.Annotated:
        return normalize(get_args(tp)[0])
    return tp


def _is_union(tp: Any) -> bool:
    return get_origin(tp) in (Union, types.UnionType)


def _split(tp: Any) -> tuple[Any, tuple[Any, ...]]:
    return get_origin(tp) or tp, get_args(tp)


def _is_empty_tuple(tp: Any) -> bool:
    return any(tp == empty for empty in _EMPTY_TUPLES)


def _tuple_items(tp: Any) -> tuple[Any, ...] | None:
    """element types of a tuple annotation, `None` for a bare tuple"""
    if _is_empty_tuple(tp):
        return ()
    return get_args(tp) or None


def is_assignable(actual: Any, expected: Any) -> bool:
    """checks whether a value annotated with `actual` can be
    passed where `expected` is declared

    Unknown or missing annotations are compatible with everything.
    """
    actual, expected = normalize(actual), normalize(expected)
    if actual is Any or expected is Any or expected is object:
        return True
    if actual in _BOTTOM or actual == expected:
        return True

    if isinstance(expected, TypeVar):
        if expected.__constraints__:
            constraints = expected.__constraints__
            return any(is_assignable(actual, c) for c in constraints)
        if expected.__bound__ is not None:
            return is_assignable(actual, expected.__bound__)
        return True
    if isinstance(actual, TypeVar):
        if actual.__constraints__:
            constraints = actual.__constraints__
            return all(is_assignable(c, expected) for c in constraints)
        if actual.__bound__ is not None:
            return is_assignable(actual.__bound__, expected)
        return True

    if _is_union(actual):
        return all(is_assignable(m, expected) for m in get_args(actual))
    if _is_union(expected):
        return any(is_assignable(actual, m) for m in get_args(expected))

    if isinstance(expected, typing.NewType):
        while isinstance(actual, typing.NewType):
            if actual is expected:
                return True
            actual = actual.__supertype__
        return False
    if isinstance(actual, typing.NewType):
        return is_assignable(actual.__supertype__, expected)

    if get_origin(actual) is Literal:
        return _literal_assignable(get_args(actual), expected)
    if get_origin(expected) is Literal:
        return False

    return _generic_assignable(actual, expected)


def _literal_assignable(values: tuple[Any, ...], expected: Any) -> bool:
    if get_origin(expected) is Literal:
        allowed = {(type(v), v) for v in get_args(expected)}
        return all((type(v), v) in allowed for v in values)
    return all(_value_fits(value, expected) for value in values)


def _value_fits(value: Any, expected: Any) -> bool:
    try:
        check_type(value, expected)
    except TypeCheckError:
        return False
    return True


def _generic_assignable(actual: Any, expected: Any) -> bool:
    actual_origin, actual_args = _split(actual)
    expected_origin, expected_args = _split(expected)

    if expected_origin is collections.abc.Callable:
        return _callable_assignable(actual, expected)

    if expected_origin is type and actual is type:
        return True

    if not _class_assignable(actual_origin, expected_origin):
        return False
    if expected_origin is tuple:
        actual_items = _tuple_items(actual)
        expected_items = _tuple_items(expected)
        if actual_items is None or expected_items is None:
            return True
        return _tuple_assignable(actual_items, expected_items)

    if expected_args and not actual_args and get_origin(actual) is None:
        actual_args = _inherited_args(actual, expected_origin)
    if not expected_args or not actual_args:
        return True

    if actual_origin is tuple:
        # a tuple flowing into a homogeneous collection
        elements = [a for a in actual_args if a is not Ellipsis]
        return all(is_assignable(a, expected_args[0]) for a in elements)

    if len(actual_args) == len(expected_args):
        pairs = list(zip(actual_args, expected_args))
    elif len(expected_args) == 1:
        pairs = [(actual_args[0], expected_args[0])]
    else:
        return True

    is_mapping = _is_subclass(expected_origin, collections.abc.Mapping)
    if is_mapping and len(pairs) == 2:
        (actual_key, expected_key), (actual_value, expected_value) = pairs
        if _is_subclass(expected_origin, collections.abc.MutableMapping):
            values_fit = _equivalent(actual_value, expected_value)
        else:
            values_fit = is_assignable(actual_value, expected_value)
        return _equivalent(actual_key, expected_key) and values_fit
    variance = _declared_variance(expected_origin, len(pairs))
    if variance is not None:
        return all(_fits(a, e, v) for (a, e), v in zip(pairs, variance))
    if expected_origin in _COVARIANT:
        return all(is_assignable(a, e) for a, e in pairs)
    return all(_equivalent(a, e) for a, e in pairs)


def _declared_variance(origin: Any, n: int) -> list[str] | None:
    """variance of the type parameters of a user-defined generic"""
    params = getattr(origin, "__parameters__", ())
    if len(params) != n or not all(isinstance(p, TypeVar) for p in params):
        return None
    return [
        "co" if p.__covariant__ else "contra" if p.__contravariant__ else "in"
        for p in params
    ]


def _fits(actual: Any, expected: Any, variance: str) -> bool:
    if variance == "co":
        return is_assignable(actual, expected)
    if variance == "contra":
        return is_assignable(expected, actual)
    return _equivalent(actual, expected)


def _inherited_args(cls: Any, target: Any) -> tuple[Any, ...]:
    """type arguments a plain class binds for the generic `target`"""
    for klass in getattr(cls, "__mro__", ()):
        if klass in _ELEMENTS:
            return (_ELEMENTS[klass],)
        for base in vars(klass).get("__orig_bases__", ()):
            origin, args = _split(base)
            if args and _class_assignable(origin, target):
                return args
    return ()


def _equivalent(a: Any, b: Any) -> bool:
    return is_assignable(a, b) and is_assignable(b, a)


def _is_subclass(cls: Any, parent: type) -> bool:
    return isinstance(cls, type) and issubclass(cls, parent)


def _class_assignable(actual: Any, expected: Any) -> bool:
    if not isinstance(actual, type) or not isinstance(expected, type):
        return actual == expected
    if any(issubclass(actual, p) for p in _PROMOTIONS.get(expected, ())):
        return True
    if is_protocol(expected):
        return _implements(actual, expected)
    try:
        return issubclass(actual, expected)
    except TypeError:
        return False


def _implements(cls: type, protocol: type) -> bool:
    """structural check of `cls` against the members of `protocol`"""
    if cls is protocol:
        return True
    declared = set(dir(cls))
    for klass in cls.__mro__:
        declared.update(getattr(klass, "__annotations__", {}))
    return get_protocol_members(protocol) <= declared


def _callable_assignable(actual: Any, expected: Any) -> bool:
    actual_origin, actual_args = _split(actual)
    if actual_origin is not collections.abc.Callable:
        return _is_subclass(actual_origin, collections.abc.Callable)
    expected_args = get_args(expected)
    if not expected_args or not actual_args:
        return True

    actual_params, actual_return = actual_args[0], actual_args[-1]
    expected_params, expected_return = expected_args[0], expected_args[-1]
    if not is_assignable(actual_return, expected_return):
        return False
    if not (
        isinstance(actual_params, list) and isinstance(expected_params, list)
    ):
        return True
    # parameters are contravariant
    return len(actual_params) == len(expected_params) and all(
        is_assignable(e, a) for a, e in zip(actual_params, expected_params)
    )


def _tuple_assignable(
    actual_args: tuple[Any, ...], expected_args: tuple[Any, ...]
) -> bool:
    actual_variadic = len(actual_args) == 2 and actual_args[1] is Ellipsis
    expected_variadic = (
        len(expected_args) == 2 and expected_args[1] is Ellipsis
    )
    if expected_variadic:
        elements = actual_args[:1] if actual_variadic else actual_args
        return all(is_assignable(a, expected_args[0]) for a in elements)
    if actual_variadic:
        return False
    return len(actual_args) == len(expected_args) and all(
        is_assignable(a, e) for a, e in zip(actual_args, expected_args)
    )


def format_type(tp: Any) -> str:
    """renders an annotation the way it would be written in source"""
    if tp is inspect.Parameter.empty or tp is Any:
        return "Any"
    if tp is None or tp is NoneType:
        return "None"
    if isinstance(tp, str):
        return tp

    if _is_empty_tuple(tp):
        return "tuple[()]"

    origin = get_origin(tp)
    if origin is not None:
        args = get_args(tp)
        if _is_union(tp):
            return " | ".join(map(format_type, args))
        if origin is typing.Annotated:
            return format_type(args[0])
        if origin is Literal:
            return f"Literal[{', '.join(map(repr, args))}]"
        if origin is collections.abc.Callable and args:
            params = args[0]
            if isinstance(params, list):
                rendered = f"[{', '.join(map(format_type, params))}]"
            elif params is Ellipsis:
                rendered = "..."
            else:
                rendered = format_type(params)
            return f"Callable[{rendered}, {format_type(args[-1])}]"
        name = getattr(origin, "__qualname__", None) or format_type(origin)
        if not args:
            return name
        inner = ", ".join(
            "..." if a is Ellipsis else format_type(a) for a in args
        )
        return f"{name}[{inner}]"

    if isinstance(tp, type):
        return tp.__qualname__
    if isinstance(tp, (TypeVar, typing.NewType, typing.ParamSpec)):
        return tp.__name__
    return repr(tp).replace("typing.", "")
