"""The Registry maps types to the providers that produce them."""
import functools
import logging
from threading import RLock
from typing import Any, Callable, Dict, List, Optional, Tuple, TypeVar

from typing_extensions import Concatenate, ParamSpec

from .errors import (
    DuplicateProviderError,
    NoReturnValuesError,
    NotRoundRobinCompatibleError,
    ProviderNotFoundError,
    RegistryError,
    ResolutionError,
    UnrepresentableValueError,
    type_name,
)
from .invoke import call
from .model import Resolver, TypeKey
from .options import ProviderOption, ProviderOptions
from .provider import (
    FactoryProvider,
    Provider,
    RoundRobinFactoryProvider,
    RoundRobinValueProvider,
    ValueProvider,
)
from .signature import (
    EMPTY,
    CallableSignature,
    ParameterSpec,
    element_type,
    inspect_callable,
    is_error_type,
    is_factory,
    pool_element_type,
)

LOG = logging.getLogger(__name__)

R = TypeVar("R")
P = ParamSpec("P")


def initialize(parent: Optional["Registry"] = None) -> "Registry":
    """Initialize a new registry instance, optionally chained to a parent."""
    LOG.debug("initializing a new registry instance (parent=%r)", parent)
    return Registry(parent)


def _synchronized(
    func: Callable[Concatenate["Registry", P], R]
) -> Callable[Concatenate["Registry", P], R]:
    """Decorator to synchronize method access with a reentrant lock."""

    @functools.wraps(func)
    def wrapper(self: "Registry", *args: P.args, **kwargs: P.kwargs) -> R:
        with self._lock:
            return func(self, *args, **kwargs)

    return wrapper


class Registry(Resolver):
    """Type-keyed store of providers, optionally falling back to a parent.

    The lock only guards the provider map. Providers serialize their own
    state, so resolving one type never waits on the resolution of another.
    """

    def __init__(self, parent: Optional["Registry"] = None) -> None:
        self._parent = parent
        self._providers: Dict[TypeKey, Provider] = {}

        self._lock = RLock()

        # factories may ask for the registry itself
        self._add_provider(ValueProvider(Registry, ProviderOptions(), self))
        if type(self) is not Registry:
            self.provide(self)

    @property
    def parent(self) -> Optional["Registry"]:
        return self._parent

    def provide(self, value_or_factory: Any, *options: ProviderOption) -> None:
        """Register a value or a factory.

        Classes, functions, methods and partials are factories: each output
        declared by their return annotation is bound to a lazy provider.
        Anything else is a value bound under its exact type.

        Parameters:
            value_or_factory: the value or factory to register.
            options: ProviderOption flags for the new provider(s).
        Raises:
            RegistrationError: the value or factory cannot be bound.
        """
        provider_options = ProviderOptions.from_options(options)
        if is_factory(value_or_factory):
            self._provide_factory(value_or_factory, provider_options)
        else:
            self._provide_value(value_or_factory, provider_options)

    def must_provide(self, value_or_factory: Any, *options: ProviderOption) -> "Registry":
        """Like provide, but returns the registry so registrations can be chained."""
        self.provide(value_or_factory, *options)
        return self

    def invoke(self, *functions: Callable[..., Any]) -> List[Any]:
        """Call each function with its parameters supplied from the registry.

        Functions are called in order and the first failure aborts the batch.

        Returns:
            The return value of every function, in order.
        """
        results = []
        for function in functions:
            results.append(call(self, function))
        return results

    def must_invoke(self, *functions: Callable[..., Any]) -> "Registry":
        """Like invoke, but returns the registry so calls can be chained."""
        self.invoke(*functions)
        return self

    def resolve(self, type_key: TypeKey) -> Any:
        return self._resolve_parameter(ParameterSpec(name="type_key", type_key=type_key), 1)

    def __getitem__(self, type_key: TypeKey) -> Any:
        """Get the value for a type from this registry or its ancestors.

        Raises:
            ProviderNotFoundError: if no registry in the chain binds the type.
        """
        return self.resolve(type_key)

    def __contains__(self, type_key: TypeKey) -> bool:
        """Check if a type is bound in this registry or any of its ancestors."""
        return self._lookup(type_key) is not None

    @_synchronized
    def __len__(self) -> int:
        return len(self._providers)

    def __repr__(self) -> str:
        return f"<Registry providers={len(self)} parent={self._parent!r}>"

    def _resolve_parameter(self, parameter: ParameterSpec, position: int) -> Any:
        if parameter.type_key is EMPTY:
            return parameter.default

        found = self._lookup(parameter.type_key)
        if found is None:
            if parameter.has_default:
                return parameter.default
            raise ProviderNotFoundError(position, parameter.type_key)

        provider, owner = found
        try:
            return provider.provide(owner)
        except RegistryError as err:
            raise ResolutionError(
                f"failed to provide parameter {position} of type "
                f"{type_name(parameter.type_key)!r}: {err}",
                position=position,
                type_key=parameter.type_key,
            ) from err

    def _lookup(self, type_key: TypeKey) -> Optional[Tuple[Provider, "Registry"]]:
        """Find the provider for a type, walking up the parent chain.

        Returns:
            The provider and the registry owning it, or None if not found.
        """
        registry: Optional[Registry] = self
        while registry is not None:
            provider = registry._get_provider(type_key)
            if provider is not None:
                return provider, registry
            registry = registry._parent
        return None

    @_synchronized
    def _get_provider(self, type_key: TypeKey) -> Optional[Provider]:
        return self._providers.get(type_key)

    @_synchronized
    def _add_provider(self, provider: Provider) -> None:
        if provider.type_key in self._providers:
            raise DuplicateProviderError(provider.type_key)
        LOG.debug("registering %r", provider)
        self._providers[provider.type_key] = provider

    def _provide_value(self, value: Any, options: ProviderOptions) -> None:
        value_type = type(value)
        if is_error_type(value_type):
            raise UnrepresentableValueError(value_type)

        provider: Provider
        if options.round_robin:
            element = pool_element_type(value)
            if is_error_type(element):
                raise UnrepresentableValueError(element)
            provider = RoundRobinValueProvider(element, options, value)
        else:
            provider = ValueProvider(value_type, options, value)
        self._add_provider(provider)

    def _provide_factory(self, factory: Callable[..., Any], options: ProviderOptions) -> None:
        signature = inspect_callable(factory)
        if not signature.returns:
            raise NoReturnValuesError(factory)

        for index, output in enumerate(signature.returns):
            # error outputs signal failure, they are never injectable
            if index in signature.error_positions or is_error_type(output):
                continue
            self._provide_factory_output(factory, signature, output, index, options)

    def _provide_factory_output(
        self,
        factory: Callable[..., Any],
        signature: CallableSignature,
        output: TypeKey,
        index: int,
        options: ProviderOptions,
    ) -> None:
        provider: FactoryProvider
        if options.round_robin:
            element = element_type(output)
            if element is None:
                raise NotRoundRobinCompatibleError(output)
            if is_error_type(element):
                raise UnrepresentableValueError(element)
            provider = RoundRobinFactoryProvider(element, options, factory, index, signature)
        else:
            provider = FactoryProvider(output, options, factory, index, signature)
        self._add_provider(provider)

        if options.eager_loading:
            self._eager_load(provider)

    def _eager_load(self, provider: FactoryProvider) -> None:
        LOG.debug("eagerly loading %r", provider)
        try:
            provider.provide(self)
        except RegistryError as err:
            raise ResolutionError(
                f"failed to eagerly load value of type {type_name(provider.type_key)!r}: {err}",
                type_key=provider.type_key,
            ) from err
        # eager loading must not use up a rotation slot
        if isinstance(provider, RoundRobinFactoryProvider):
            provider.rewind()
