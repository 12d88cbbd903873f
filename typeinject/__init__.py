"""
The Registry resolves the parameters of any callable from the types it has been given.

Values are registered under their exact type, factories under every type their
return annotation declares. Invoking a function then supplies each parameter
by looking up its annotated type:

from typeinject import initialize

registry = initialize()
registry.provide(Config(url='http://localhost'))
registry.provide(connect)  # def connect(config: Config) -> Connection

def handler(conn: Connection): ...
registry.invoke(handler)

Type keys are matched exactly. A plain value is keyed by type(value), so
registry.provide([1, 2]) binds `list` and will not satisfy a parameter
annotated List[int]; provide a factory annotated -> List[int] for that.
Exception classes and exception values are never injectable.

Factories run lazily, once, on the first lookup of a type they produce. Pass
ProviderOption.MULTI_INSTANCE to run them on every lookup instead, or
ProviderOption.EAGER_LOADING to run them while registering:

registry.provide(connect, ProviderOption.EAGER_LOADING)

A list or tuple provided with ProviderOption.ROUND_ROBIN is bound under its
element type, and each lookup hands out the next element:

registry.provide([Replica('a'), Replica('b')], ProviderOption.ROUND_ROBIN)

A factory can declare an exception type among its outputs, e.g.
-> Tuple[Connection, Optional[Exception]]; a returned exception fails the
lookup and is raised to the caller as is.

Registries chain: a child created with initialize(parent) falls back to its
parent for any type it does not bind itself. Every registry provides itself,
so factories can ask for the Registry as a parameter.
"""

__version__ = "1.0.0"

from .errors import (
    DuplicateProviderError,
    EmptyRoundRobinError,
    InvalidCallableError,
    NoReturnValuesError,
    NotRoundRobinCompatibleError,
    ProviderNotFoundError,
    RegistrationError,
    RegistryError,
    ResolutionError,
    UnrepresentableValueError,
)
from .options import ProviderOption, ProviderOptions
from .registry import Registry, initialize

__all__ = [
    "DuplicateProviderError",
    "EmptyRoundRobinError",
    "InvalidCallableError",
    "NoReturnValuesError",
    "NotRoundRobinCompatibleError",
    "ProviderNotFoundError",
    "ProviderOption",
    "ProviderOptions",
    "RegistrationError",
    "Registry",
    "RegistryError",
    "ResolutionError",
    "UnrepresentableValueError",
    "initialize",
]
