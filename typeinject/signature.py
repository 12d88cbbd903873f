"""Signature inspection: which types a callable takes and which it produces."""

import collections.abc
import functools
import inspect
import types
import typing
from typing import Any, Callable, Optional, Sequence, Tuple, Union

from attr import define

from .errors import InvalidCallableError, NotRoundRobinCompatibleError

EMPTY = inspect.Parameter.empty

_SKIPPED_KINDS = (inspect.Parameter.VAR_POSITIONAL, inspect.Parameter.VAR_KEYWORD)
_SEQUENCE_ORIGINS = (
    list,
    tuple,
    collections.abc.Sequence,
    collections.abc.MutableSequence,
)
_UNION_ORIGINS = (Union, types.UnionType)


@define(frozen=True)
class ParameterSpec:
    """One injectable parameter of a callable."""

    name: str
    type_key: Any
    keyword_only: bool = False
    default: Any = EMPTY

    @property
    def has_default(self) -> bool:
        return self.default is not EMPTY


@define(frozen=True)
class CallableSignature:
    """What a callable needs (parameters) and what it declares to produce (returns).

    error_positions are the indexes of returns typed as exceptions, they are
    never provided and are checked after every call instead.
    """

    parameters: Tuple[ParameterSpec, ...]
    returns: Tuple[Any, ...]
    error_positions: Tuple[int, ...] = ()


def describe(fn: Any) -> str:
    return getattr(fn, "__qualname__", None) or repr(fn)


def _unwrap_partial(fn: Any) -> Any:
    while isinstance(fn, functools.partial):
        fn = fn.func
    return fn


def is_factory(obj: Any) -> bool:
    """True for objects provide() treats as factories rather than plain values."""
    target = _unwrap_partial(obj)
    return inspect.isclass(target) or inspect.isroutine(target)


def is_error_type(type_key: Any) -> bool:
    """True for exception classes and Optional/unions made only of exception classes."""
    if inspect.isclass(type_key):
        return issubclass(type_key, BaseException)
    if typing.get_origin(type_key) in _UNION_ORIGINS:
        members = [arg for arg in typing.get_args(type_key) if arg is not type(None)]
        return bool(members) and all(is_error_type(member) for member in members)
    return False


def declared_outputs(annotation: Any) -> Tuple[Any, ...]:
    """Split a return annotation into the outputs it declares.

    Tuple[A, B] declares two outputs, Tuple[A, ...] is a single homogeneous
    sequence, a missing or None annotation declares nothing.
    """
    if annotation is EMPTY or annotation is None or annotation is type(None):
        return ()
    if annotation is tuple or annotation is typing.Tuple:
        return (annotation,)
    if typing.get_origin(annotation) is tuple:
        args = typing.get_args(annotation)
        if args == ((),):
            return ()
        if len(args) == 2 and args[1] is Ellipsis:
            return (annotation,)
        return tuple(args)
    return (annotation,)


def element_type(annotation: Any) -> Optional[Any]:
    """Element type of a homogeneous sequence annotation, None for anything else."""
    origin = typing.get_origin(annotation)
    if origin not in _SEQUENCE_ORIGINS:
        return None
    args = typing.get_args(annotation)
    if origin is tuple:
        if len(args) == 2 and args[1] is Ellipsis:
            return args[0]
        return None
    if len(args) == 1:
        return args[0]
    return None


def pool_element_type(value: Sequence[Any]) -> type:
    """Element type of a value offered as a round-robin pool."""
    value_type = type(value)
    if not isinstance(value, (list, tuple)):
        raise NotRoundRobinCompatibleError(value_type)
    if not value:
        raise NotRoundRobinCompatibleError(value_type, "the pool is empty")
    element_types = {type(item) for item in value}
    if len(element_types) != 1:
        raise NotRoundRobinCompatibleError(value_type, "elements must share one type")
    return element_types.pop()


def inspect_callable(fn: Callable[..., Any]) -> CallableSignature:
    """Read the parameters and declared outputs of fn.

    Raises:
        InvalidCallableError: fn is not callable, has no inspectable signature,
            or has a parameter with neither an annotation nor a default.
    """
    if not callable(fn):
        raise InvalidCallableError(f"can't invoke a non-callable value {fn!r}")
    try:
        sig = inspect.signature(fn, eval_str=True)
    except (TypeError, ValueError, NameError) as err:
        raise InvalidCallableError(f"can't inspect the signature of {describe(fn)}: {err}") from err

    parameters = []
    for param in sig.parameters.values():
        if param.kind in _SKIPPED_KINDS:
            continue
        if param.annotation is EMPTY and param.default is EMPTY:
            raise InvalidCallableError(
                f"parameter {len(parameters) + 1} ({param.name}) of {describe(fn)} "
                "has no type annotation"
            )
        parameters.append(
            ParameterSpec(
                name=param.name,
                type_key=param.annotation,
                keyword_only=param.kind is inspect.Parameter.KEYWORD_ONLY,
                default=param.default,
            )
        )

    target = _unwrap_partial(fn)
    if inspect.isclass(target):
        # constructing an exception class is not a failure
        return CallableSignature(parameters=tuple(parameters), returns=(target,))

    returns = declared_outputs(sig.return_annotation)
    return CallableSignature(
        parameters=tuple(parameters),
        returns=returns,
        error_positions=tuple(i for i, output in enumerate(returns) if is_error_type(output)),
    )
