"""Errors raised while registering providers or resolving parameters."""
from typing import Any, Optional


def type_name(type_key: Any) -> str:
    """Render a type key the way it is written in annotations."""
    if isinstance(type_key, type):
        if type_key.__module__ == "builtins":
            return type_key.__qualname__
        return f"{type_key.__module__}.{type_key.__qualname__}"
    return repr(type_key)


class RegistryError(Exception):
    """Base class for every error raised by the registry."""


class RegistrationError(RegistryError):
    """A value or factory could not be registered."""


class DuplicateProviderError(RegistrationError):
    def __init__(self, type_key: Any) -> None:
        super().__init__(f"provider of type {type_name(type_key)!r} already exists")
        self.type_key = type_key


class UnrepresentableValueError(RegistrationError):
    def __init__(self, type_key: Any) -> None:
        super().__init__(f"can't provide value of type {type_name(type_key)!r}")
        self.type_key = type_key


class NotRoundRobinCompatibleError(RegistrationError):
    def __init__(self, type_key: Any, reason: str = "must be a list, tuple or sequence") -> None:
        super().__init__(f"can't round-robin value of type {type_name(type_key)!r}, {reason}")
        self.type_key = type_key


class NoReturnValuesError(RegistrationError):
    def __init__(self, factory: Any) -> None:
        name = getattr(factory, "__qualname__", repr(factory))
        super().__init__(f"can't declare factory provider {name} without return values")
        self.factory = factory


class InvalidCallableError(RegistryError, TypeError):
    """Raised when invoke() is handed something that cannot be called with injection."""


class ResolutionError(RegistryError):
    """A parameter could not be supplied.

    Parameters:
        message: description of the failure.
        position: 1-based position of the parameter being resolved.
        type_key: the annotated type of that parameter.
    """

    def __init__(
        self, message: str, position: Optional[int] = None, type_key: Any = None
    ) -> None:
        super().__init__(message)
        self.position = position
        self.type_key = type_key


class ProviderNotFoundError(ResolutionError, LookupError):
    def __init__(self, position: int, type_key: Any) -> None:
        super().__init__(
            f"no provider for parameter {position} of type {type_name(type_key)!r}",
            position=position,
            type_key=type_key,
        )


class EmptyRoundRobinError(ResolutionError):
    def __init__(self, type_key: Any) -> None:
        super().__init__(
            f"round-robin pool for type {type_name(type_key)!r} is empty", type_key=type_key
        )
