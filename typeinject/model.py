import abc
from typing import Any

from typing_extensions import TypeAlias

from .signature import ParameterSpec

# Anything usable as an annotation: classes, generic aliases, unions, ...
TypeKey: TypeAlias = Any


class Resolver(abc.ABC):
    """
    Interface capable of supplying values for the parameters of a callable.
    This interface primarily exists as a way to create a forward reference to Registry.
    """

    @abc.abstractmethod
    def resolve(self, type_key: TypeKey) -> Any:
        ...

    @abc.abstractmethod
    def _resolve_parameter(self, parameter: ParameterSpec, position: int) -> Any:
        """
        Supply the value for one parameter, position is 1-based and only used
        to describe failures.
        """
        ...
