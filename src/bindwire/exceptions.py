from __future__ import annotations

from typing import Any


def describe_key(key: Any) -> str:
    """Return a readable name for a binding key in error messages."""
    if isinstance(key, type):
        return key.__qualname__
    if isinstance(key, str):
        return key
    return repr(key)


class BindwireError(Exception):
    """Represent a base class for all bindwire-specific failures.

    Catch this type when you want to handle any bindwire error path without
    matching each concrete exception class individually.
    """


class BindwireNotBoundError(BindwireError):
    """Signal that an operation requires an existing binding.

    Raised by ``Container.extend``, ``Container.raw``, ``Container.unbind`` and
    by the mapping sugar ``container[key]`` / ``del container[key]`` when no
    binding is registered under the key.

    Typical fix is calling ``container.bind(key, ...)`` before extending or
    reading the binding.
    """

    def __init__(self, abstract: Any) -> None:
        self.abstract = abstract
        super().__init__(f"Type {describe_key(abstract)} is not bound.")


class BindwireNotInstantiableError(BindwireError):
    """Signal that a build target cannot be constructed.

    Raised while building an identifier that is not a concrete class: an
    abstract base class, a protocol, or a string that names no binding and no
    importable class.

    Typical fix is binding the abstraction to an implementation, for example
    ``container.bind(Repository, SqlRepository)``.
    """

    def __init__(self, concrete: Any) -> None:
        self.concrete = concrete
        super().__init__(f"Target [{describe_key(concrete)}] is not instantiable.")


class BindwireUnresolvableDependencyError(BindwireError):
    """Signal a constructor parameter the container cannot supply.

    Raised when a parameter has no class annotation (or a scalar one such as
    ``str`` or ``int``) and no default value.

    Typical fixes include giving the parameter a default, or binding the class
    to a factory that passes the value explicitly.
    """

    def __init__(self, parameter: str, concrete: Any) -> None:
        self.parameter = parameter
        self.concrete = concrete
        super().__init__(
            f"Unresolvable dependency resolving parameter '{parameter}' "
            f"of [{describe_key(concrete)}].",
        )


class BindwireCircularDependencyError(BindwireError):
    """Signal a dependency cycle detected during resolution.

    ``chain`` holds the keys being resolved, ending with the key that closed
    the cycle.
    """

    def __init__(self, abstract: Any, chain: list[Any]) -> None:
        self.abstract = abstract
        self.chain = chain
        rendered = " -> ".join(describe_key(key) for key in chain)
        super().__init__(f"Circular dependency detected: {rendered}")


class BindwireInvalidBindingError(BindwireError):
    """Signal invalid arguments passed to a registration method."""
