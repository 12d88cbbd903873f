from enum import Enum
from typing import Iterable

from attr import define, field


class ProviderOption(Enum):
    """Options accepted by Registry.provide.

    EAGER_LOADING: run the factory during registration so its errors surface early.
    MULTI_INSTANCE: never cache, every resolution calls the factory again.
    ROUND_ROBIN: treat a sequence as a rotation pool bound under its element type.
    """

    EAGER_LOADING = "eager_loading"
    MULTI_INSTANCE = "multi_instance"
    ROUND_ROBIN = "round_robin"


@define(frozen=True)
class ProviderOptions:
    """Flags a provider is created with; immutable once the provider exists."""

    eager_loading: bool = field(default=False)
    multi_instance: bool = field(default=False)
    round_robin: bool = field(default=False)

    @classmethod
    def from_options(cls, options: Iterable[ProviderOption]) -> "ProviderOptions":
        flags = set()
        for option in options:
            if not isinstance(option, ProviderOption):
                raise TypeError(f"expected a ProviderOption, got {option!r}")
            flags.add(option)
        return cls(
            eager_loading=ProviderOption.EAGER_LOADING in flags,
            multi_instance=ProviderOption.MULTI_INSTANCE in flags,
            round_robin=ProviderOption.ROUND_ROBIN in flags,
        )
