from __future__ import annotations

import logging
from collections.abc import Callable, Hashable, Mapping
from contextlib import AbstractContextManager, nullcontext
from dataclasses import replace
from types import MappingProxyType
from typing import Any, TypeVar, overload

from bindwire.bindings import (
    Binding,
    Decorator,
    Factory,
    constant,
    extract_alias,
    is_factory,
)
from bindwire.bindings import share as share_factory
from bindwire.defaults import DEFAULT_DETECT_CYCLES
from bindwire.exceptions import (
    BindwireNotBoundError,
    BindwireNotInstantiableError,
    BindwireUnresolvableDependencyError,
    describe_key,
)
from bindwire.introspection import ConstructorParameter, InspectTypeDescriptor, TypeDescriptor
from bindwire.resolution_stack import ResolutionStack

T = TypeVar("T")
D = TypeVar("D", bound=Decorator)

logger = logging.getLogger(__name__)
_SKIPPED = object()


class Container:
    """Register construction strategies and resolve instances on demand.

    Keys are usually classes or protocols, but any hashable value works,
    strings included. Unbound concrete classes are auto-wired: their
    constructor parameters are resolved recursively from their annotations.

    Example:
        container = Container()
        container.bind(Repository, SqlRepository)
        container.singleton({Settings: "settings"})
        service = container.make(UserService)

    """

    __slots__ = (
        "_aliases",
        "_bindings",
        "_detect_cycles",
        "_instances",
        "_resolution_stack",
        "_type_descriptor",
    )

    def __init__(
        self,
        bindings: Mapping[Hashable, Any] | None = None,
        *,
        type_descriptor: TypeDescriptor | None = None,
        detect_cycles: bool = DEFAULT_DETECT_CYCLES,
    ) -> None:
        """Initialize an empty container.

        Args:
            bindings: Optional ``abstract -> concrete`` pairs passed to ``bind``.
            type_descriptor: Capability used to inspect concrete types. Defaults
                to ``InspectTypeDescriptor``.
            detect_cycles: Raise ``BindwireCircularDependencyError`` on cyclic
                graphs instead of recursing until the interpreter gives up.

        """
        self._bindings: dict[Hashable, Binding] = {}
        self._instances: dict[Hashable, Any] = {}
        self._aliases: dict[Hashable, Hashable] = {}
        self._type_descriptor: TypeDescriptor = type_descriptor or InspectTypeDescriptor()
        self._detect_cycles = detect_cycles
        self._resolution_stack = ResolutionStack()

        self._instances[type(self)] = self
        for abstract, concrete in (bindings or {}).items():
            self.bind(abstract, concrete)

    def __repr__(self) -> str:
        return (
            f"{type(self).__name__}(bindings={len(self._bindings)}, "
            f"instances={len(self._instances)}, aliases={len(self._aliases)})"
        )

    def bind(self, abstract: Any, concrete: Any = None, *, shared: bool = False) -> None:
        """Register a binding with the container.

        Args:
            abstract: Key to register. A single-entry mapping ``{abstract: alias}``
                registers ``alias`` as a short name for ``abstract`` as well.
            concrete: Factory taking the container, or a key/class to construct.
                Defaults to ``abstract`` itself.
            shared: Cache the first resolved value and reuse it afterwards.

        """
        abstract, alias = extract_alias(abstract)
        if alias is not None:
            self.alias(abstract, alias)

        if concrete is None:
            concrete = abstract

        factory = concrete if is_factory(concrete) else self._factory_for(abstract, concrete)
        self._bindings[abstract] = Binding(factory=factory, shared=shared)
        logger.debug("Bound %s (shared=%s)", describe_key(abstract), shared)

    def singleton(self, abstract: Any, concrete: Any = None) -> None:
        """Register a shared binding with the container."""
        self.bind(abstract, concrete, shared=True)

    def instance(self, abstract: Any, value: Any) -> None:
        """Register an existing value as the shared instance of ``abstract``."""
        abstract, alias = extract_alias(abstract)
        if alias is not None:
            self.alias(abstract, alias)

        self._instances[abstract] = value
        logger.debug("Stored instance for %s", describe_key(abstract))

    def alias(self, abstract: Hashable, alias: Hashable) -> None:
        """Register ``alias`` as a short name for ``abstract``.

        Aliases are followed one hop only: an alias of an alias is not resolved
        through to the final key.
        """
        self._aliases[alias] = abstract
        logger.debug("Aliased %s to %s", describe_key(alias), describe_key(abstract))

    def is_alias(self, name: Hashable) -> bool:
        return name in self._aliases

    def get_alias(self, name: Hashable) -> Hashable:
        """Return the key ``name`` stands for, or ``name`` if it is not an alias."""
        return self._aliases.get(name, name)

    def extend(self, abstract: Hashable, decorator: Decorator) -> None:
        """Wrap the factory bound to ``abstract`` with ``decorator``.

        On every resolution the previous factory runs first, then
        ``decorator(value, container)`` replaces its result. Extending several
        times applies decorators in registration order, innermost first. The
        shared flag of the binding is kept.

        Raises:
            BindwireNotBoundError: If ``abstract`` has no binding.

        """
        binding = self.raw(abstract)
        inner = binding.factory

        def extended_factory(container: Container) -> Any:
            return decorator(inner(container), container)

        self._bindings[abstract] = replace(binding, factory=extended_factory)
        logger.debug("Extended %s", describe_key(abstract))

    def extending(self, abstract: Hashable) -> Callable[[D], D]:
        """Return a decorator that registers the decorated function via ``extend``."""

        def register(decorator: D) -> D:
            self.extend(abstract, decorator)
            return decorator

        return register

    def share(self, factory: Factory) -> Factory:
        """Wrap ``factory`` so it runs once and returns the first result afterwards."""
        return share_factory(factory)

    @overload
    def make(self, abstract: type[T]) -> T: ...

    @overload
    def make(self, abstract: Hashable) -> Any: ...

    def make(self, abstract: Any) -> Any:
        """Resolve ``abstract`` from the container.

        Follows one alias hop, returns a cached instance when present, and
        otherwise builds the bound factory or, without a binding, the key
        itself as a concrete type. Results of shared bindings are cached.

        Raises:
            BindwireNotInstantiableError: If the concrete cannot be constructed.
            BindwireUnresolvableDependencyError: If a constructor parameter
                cannot be supplied.
            BindwireCircularDependencyError: If ``abstract`` depends on itself
                and cycle detection is enabled.

        """
        abstract = self.get_alias(abstract)

        if abstract in self._instances:
            return self._instances[abstract]

        binding = self._bindings.get(abstract)
        with self._tracking(abstract):
            value = self.build(abstract if binding is None else binding.factory)

        if binding is not None and binding.shared:
            self._instances[abstract] = value
            logger.debug("Cached shared instance of %s", describe_key(abstract))

        return value

    def build(self, concrete: Any) -> Any:
        """Instantiate ``concrete`` without consulting bindings or the cache.

        Factories are called with the container. Anything else is treated as
        a concrete type whose constructor parameters are resolved through
        ``make`` in declared order.

        Raises:
            BindwireNotInstantiableError: If ``concrete`` is not constructible.
            BindwireUnresolvableDependencyError: If a parameter has no injectable
                type and no default.

        """
        if is_factory(concrete):
            return concrete(self)

        descriptor = self._type_descriptor
        if not descriptor.is_constructible(concrete):
            raise BindwireNotInstantiableError(concrete)

        constructor = descriptor.load(concrete)
        parameters = descriptor.constructor_parameters(concrete)
        if not parameters:
            return constructor()

        args: list[Any] = []
        kwargs: dict[str, Any] = {}
        positional_open = True
        for parameter in parameters:
            if parameter.positional_only and not positional_open:
                continue
            value = self._resolve_parameter(concrete, parameter)
            if value is _SKIPPED:
                # Later positional-only arguments cannot be passed past a gap.
                positional_open = positional_open and not parameter.positional_only
            elif parameter.positional_only:
                args.append(value)
            else:
                kwargs[parameter.name] = value

        return constructor(*args, **kwargs)

    def raw(self, abstract: Hashable) -> Binding:
        """Return the binding registered for ``abstract``.

        Raises:
            BindwireNotBoundError: If ``abstract`` has no binding.

        """
        binding = self._bindings.get(abstract)
        if binding is None:
            raise BindwireNotBoundError(abstract)
        return binding

    def bindings(self) -> Mapping[Hashable, Binding]:
        """Return a read-only snapshot of all bindings."""
        return MappingProxyType(dict(self._bindings))

    def unbind(self, abstract: Hashable) -> None:
        """Remove the binding for ``abstract``; cached instances are kept.

        Raises:
            BindwireNotBoundError: If ``abstract`` has no binding.

        """
        if abstract not in self._bindings:
            raise BindwireNotBoundError(abstract)
        del self._bindings[abstract]
        logger.debug("Unbound %s", describe_key(abstract))

    def forget_instance(self, abstract: Hashable) -> None:
        """Drop the cached instance of ``abstract``; the container itself stays."""
        if abstract is type(self):
            return
        self._instances.pop(abstract, None)

    def forget_instances(self) -> None:
        """Drop every cached instance except the container itself."""
        self._instances.clear()
        self._instances[type(self)] = self

    def __contains__(self, abstract: object) -> bool:
        return abstract in self._bindings

    def __getitem__(self, abstract: Hashable) -> Any:
        if abstract not in self._bindings:
            raise BindwireNotBoundError(abstract)
        return self.make(abstract)

    def __setitem__(self, abstract: Hashable, value: Any) -> None:
        self.bind(abstract, value if is_factory(value) else constant(value))

    def __delitem__(self, abstract: Hashable) -> None:
        self.unbind(abstract)

    def _factory_for(self, abstract: Hashable, concrete: Any) -> Factory:
        if abstract == concrete:

            def build_concrete(container: Container) -> Any:
                return container.build(concrete)

            return build_concrete

        def make_concrete(container: Container) -> Any:
            return container.make(concrete)

        return make_concrete

    def _resolve_parameter(self, concrete: Any, parameter: ConstructorParameter) -> Any:
        if parameter.dependency is None:
            if not parameter.has_default:
                raise BindwireUnresolvableDependencyError(parameter.name, concrete)
            return _SKIPPED

        try:
            return self.make(parameter.dependency)
        except BindwireNotInstantiableError as exc:
            # Only the parameter's own type may fall back to its default.
            if not parameter.has_default or exc.concrete is not parameter.dependency:
                raise
            return _SKIPPED

    def _tracking(self, abstract: Hashable) -> AbstractContextManager[None]:
        if not self._detect_cycles:
            return nullcontext()
        return self._resolution_stack.track(abstract)
