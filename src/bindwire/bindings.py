from __future__ import annotations

import inspect
from collections.abc import Callable, Hashable, Mapping
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, TypeAlias

from bindwire.exceptions import BindwireInvalidBindingError

if TYPE_CHECKING:
    from bindwire.container import Container

Factory: TypeAlias = Callable[["Container"], Any]
"""A callable receiving the container and returning the resolved value."""

Decorator: TypeAlias = Callable[[Any, "Container"], Any]
"""A callable receiving the inner value and the container, returning the new value."""

_UNSET = object()


@dataclass(frozen=True, slots=True)
class Binding:
    """Construction strategy registered under an abstract key."""

    factory: Factory
    shared: bool = False


def is_factory(candidate: object) -> bool:
    """Return whether a concrete is already a factory rather than a type name.

    Classes are callable but name a type to construct, so they are never
    treated as factories.
    """
    return callable(candidate) and not inspect.isclass(candidate)


def extract_alias(definition: Any) -> tuple[Hashable, Hashable | None]:
    """Split ``{abstract: alias}`` registration sugar into its parts.

    Any non-mapping definition is returned unchanged with no alias.
    """
    if not isinstance(definition, Mapping):
        return definition, None
    if len(definition) != 1:
        msg = (
            "Alias definitions must be a single-entry mapping of "
            f"{{abstract: alias}}, got {len(definition)} entries."
        )
        raise BindwireInvalidBindingError(msg)
    ((abstract, alias),) = definition.items()
    return abstract, alias


def share(factory: Factory) -> Factory:
    """Wrap a factory so it runs once and keeps returning the first result.

    The memoized value lives in the wrapper, so it survives re-binding the
    wrapper under another key and does not depend on the binding's
    ``shared`` flag.
    """
    value: Any = _UNSET

    def shared_factory(container: Container) -> Any:
        nonlocal value
        if value is _UNSET:
            value = factory(container)
        return value

    return shared_factory


def constant(value: Any) -> Factory:
    """Return a factory that always hands back ``value``."""

    def constant_factory(_container: Container) -> Any:
        return value

    return constant_factory
