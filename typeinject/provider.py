"""Providers produce the values registered for one type key."""
import abc
import logging
from enum import Enum
from threading import RLock
from typing import Any, Callable, Optional, Sequence, cast

from .errors import EmptyRoundRobinError, type_name
from .invoke import call
from .model import Resolver, TypeKey
from .options import ProviderOptions
from .signature import CallableSignature, inspect_callable

LOG = logging.getLogger(__name__)


class Strategy(Enum):
    VALUE = "value"
    VALUE_ROUND_ROBIN = "value_round_robin"
    FUNCTION = "function"
    FUNCTION_ROUND_ROBIN = "function_round_robin"


class _Unset:
    def __bool__(self):
        return False

    def __repr__(self) -> str:
        return "<unset>"


_UNSET = _Unset()


class Provider(abc.ABC):
    """Binding of one type key to a strategy for producing its values.

    The strategy is fixed by the subclass; only the cache and the round-robin
    cursor change after construction, always under the provider's own lock.
    """

    strategy: Strategy

    def __init__(self, type_key: TypeKey, options: ProviderOptions) -> None:
        self.type_key = type_key
        self.options = options
        self._lock = RLock()

    @abc.abstractmethod
    def provide(self, resolver: Resolver) -> Any:
        """Produce a value, using resolver for any factory parameters."""
        ...

    def __repr__(self) -> str:
        return f"<{type(self).__name__} {type_name(self.type_key)}>"


class _RoundRobin:
    """Cursor over a sequence that advances and wraps on every pick."""

    type_key: TypeKey
    _lock: RLock

    def _init_cursor(self) -> None:
        self._cursor = -1

    def _next(self, pool: Sequence[Any]) -> Any:
        with self._lock:
            if len(pool) == 0:
                raise EmptyRoundRobinError(self.type_key)
            self._cursor += 1
            if self._cursor >= len(pool):
                self._cursor = 0
            return pool[self._cursor]

    def rewind(self) -> None:
        """Step the cursor back so the last pick is handed out again."""
        with self._lock:
            self._cursor -= 1


class ValueProvider(Provider):
    strategy = Strategy.VALUE

    def __init__(self, type_key: TypeKey, options: ProviderOptions, value: Any) -> None:
        super().__init__(type_key, options)
        self._value = value

    def provide(self, resolver: Resolver) -> Any:
        return self._value


class RoundRobinValueProvider(_RoundRobin, Provider):
    strategy = Strategy.VALUE_ROUND_ROBIN

    def __init__(
        self, type_key: TypeKey, options: ProviderOptions, pool: Sequence[Any]
    ) -> None:
        super().__init__(type_key, options)
        self._pool = pool
        self._init_cursor()

    def provide(self, resolver: Resolver) -> Any:
        return self._next(self._pool)


class FactoryProvider(Provider):
    """Lazily calls a factory and keeps one of its outputs.

    Until the first successful call the provider is unresolved. Afterwards the
    output is cached and the factory reference dropped, unless the provider is
    multi-instance, in which case every resolution calls the factory again.
    """

    strategy = Strategy.FUNCTION

    def __init__(
        self,
        type_key: TypeKey,
        options: ProviderOptions,
        factory: Callable[..., Any],
        index: int = 0,
        signature: Optional[CallableSignature] = None,
    ) -> None:
        super().__init__(type_key, options)
        self._factory: Optional[Callable[..., Any]] = factory
        self._signature: Optional[CallableSignature] = signature or inspect_callable(factory)
        self._index = index
        self._cache: Any = _UNSET

    @property
    def resolved(self) -> bool:
        return self._cache is not _UNSET

    def _produce(self, resolver: Resolver) -> Any:
        # only called while the factory has not been dropped
        factory = cast(Callable[..., Any], self._factory)
        signature = cast(CallableSignature, self._signature)
        LOG.debug("calling factory for %s", self)
        results = call(resolver, factory, signature)
        if len(signature.returns) > 1:
            return results[self._index]
        return results

    def _value(self, resolver: Resolver) -> Any:
        if self.options.multi_instance:
            return self._produce(resolver)
        with self._lock:
            if self._cache is _UNSET:
                self._cache = self._produce(resolver)
                self._factory = None
                self._signature = None
            return self._cache

    def provide(self, resolver: Resolver) -> Any:
        return self._value(resolver)


class RoundRobinFactoryProvider(_RoundRobin, FactoryProvider):
    strategy = Strategy.FUNCTION_ROUND_ROBIN

    def __init__(
        self,
        type_key: TypeKey,
        options: ProviderOptions,
        factory: Callable[..., Any],
        index: int = 0,
        signature: Optional[CallableSignature] = None,
    ) -> None:
        super().__init__(type_key, options, factory, index, signature)
        self._init_cursor()

    def provide(self, resolver: Resolver) -> Any:
        return self._next(self._value(resolver))
