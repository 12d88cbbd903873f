"""Calls arbitrary callables with their parameters supplied by a Resolver."""
import logging
from typing import Any, Callable, Dict, List, Optional

from .model import Resolver
from .signature import CallableSignature, describe, inspect_callable

LOG = logging.getLogger(__name__)


def call(
    resolver: Resolver,
    fn: Callable[..., Any],
    signature: Optional[CallableSignature] = None,
) -> Any:
    """Resolve every parameter of fn from resolver, then call it.

    Parameters are resolved left to right and the first failure aborts the
    call. After the call, any declared error output holding an exception is
    raised as is; otherwise the return value is passed through untouched.

    Parameters:
        resolver: where parameter values come from.
        fn: the callable to invoke.
        signature: a previously inspected signature of fn, if available.
    """
    if signature is None:
        signature = inspect_callable(fn)

    args: List[Any] = []
    kwargs: Dict[str, Any] = {}
    for position, parameter in enumerate(signature.parameters, start=1):
        value = resolver._resolve_parameter(parameter, position)
        if parameter.keyword_only:
            kwargs[parameter.name] = value
        else:
            args.append(value)

    LOG.debug("calling %s with %d injected parameters", describe(fn), len(signature.parameters))
    result = fn(*args, **kwargs)
    _raise_returned_error(signature, result)
    return result


def _raise_returned_error(signature: CallableSignature, result: Any) -> None:
    if not signature.error_positions:
        return
    if len(signature.returns) == 1:
        if isinstance(result, BaseException):
            raise result
        return
    if not isinstance(result, tuple):
        return
    for index in signature.error_positions:
        if index < len(result) and isinstance(result[index], BaseException):
            raise result[index]
