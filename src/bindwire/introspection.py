from __future__ import annotations

import importlib
import inspect
import types
from collections.abc import Callable, Hashable, Iterable
from dataclasses import dataclass
from typing import TYPE_CHECKING, Annotated, Any, Protocol, get_args, get_origin, get_type_hints

from bindwire.defaults import DEFAULT_SCALAR_BASE_TYPES, DEFAULT_SCALAR_TYPES
from bindwire.exceptions import BindwireNotInstantiableError

if TYPE_CHECKING:
    from typing_extensions import Self


@dataclass(frozen=True, slots=True)
class ConstructorParameter:
    """One constructor parameter as seen by the builder.

    ``dependency`` is the key the container resolves for the parameter, or
    ``None`` when the parameter carries no injectable class type.
    """

    name: str
    dependency: Hashable | None
    has_default: bool = False
    positional_only: bool = False


class TypeDescriptor(Protocol):
    """Describe how concrete keys are constructed."""

    def is_constructible(self, concrete: Any) -> bool:
        """Return whether ``concrete`` can be constructed directly."""

    def constructor_parameters(self, concrete: Any) -> tuple[ConstructorParameter, ...]:
        """Return constructor parameters of ``concrete`` in declared order."""

    def load(self, concrete: Any) -> Callable[..., Any]:
        """Return the callable that constructs ``concrete``."""


def _is_runtime_class(candidate: object) -> bool:
    return isinstance(candidate, type) and not isinstance(candidate, types.GenericAlias)


class InspectTypeDescriptor:
    """Describe classes by reflecting on their ``__init__`` signatures.

    Classes are described directly. Strings are treated as importable dotted
    paths, either ``"package.module.ClassName"`` or
    ``"package.module:ClassName"``. Anything else is not constructible.

    Parameter annotations resolve through ``typing.get_type_hints``.
    ``Annotated[T, ...]`` is unwrapped to ``T``. Annotations that are not a
    runtime class, or are one of the configured scalar types, produce a
    parameter without a dependency.
    """

    def __init__(
        self,
        *,
        scalar_types: Iterable[type[Any]] = DEFAULT_SCALAR_TYPES,
        scalar_base_types: tuple[type[Any], ...] = DEFAULT_SCALAR_BASE_TYPES,
    ) -> None:
        self._scalar_types = frozenset(scalar_types)
        self._scalar_base_types = scalar_base_types
        self._parameters_cache: dict[type[Any], tuple[ConstructorParameter, ...]] = {}

    def is_constructible(self, concrete: Any) -> bool:
        cls = self._load_class(concrete)
        if cls is None:
            return False
        if inspect.isabstract(cls):
            return False
        if getattr(cls, "_is_protocol", False):
            return False
        return not issubclass(cls, type)

    def load(self, concrete: Any) -> Callable[..., Any]:
        cls = self._load_class(concrete)
        if cls is None:
            raise BindwireNotInstantiableError(concrete)
        return cls

    def constructor_parameters(self, concrete: Any) -> tuple[ConstructorParameter, ...]:
        cls = self._load_class(concrete)
        if cls is None:
            raise BindwireNotInstantiableError(concrete)

        cached = self._parameters_cache.get(cls)
        if cached is not None:
            return cached

        try:
            signature = inspect.signature(cls)
        except (ValueError, TypeError):
            # Builtins and extension types without introspectable signatures.
            signature = inspect.Signature()

        hints = self._type_hints(cls)
        parameters = []
        for parameter in signature.parameters.values():
            if parameter.kind in (parameter.VAR_POSITIONAL, parameter.VAR_KEYWORD):
                continue
            annotation = hints.get(parameter.name, parameter.annotation)
            parameters.append(
                ConstructorParameter(
                    name=parameter.name,
                    dependency=self._dependency_for(annotation),
                    has_default=parameter.default is not parameter.empty,
                    positional_only=parameter.kind is parameter.POSITIONAL_ONLY,
                ),
            )

        result = tuple(parameters)
        self._parameters_cache[cls] = result
        return result

    def _dependency_for(self, annotation: Any) -> type[Any] | None:
        if annotation is inspect.Parameter.empty:
            return None
        if get_origin(annotation) is Annotated:
            annotation = get_args(annotation)[0]
        if not _is_runtime_class(annotation):
            return None
        if annotation in self._scalar_types:
            return None
        if issubclass(annotation, self._scalar_base_types):
            return None
        return annotation

    def _type_hints(self, cls: type[Any]) -> dict[str, Any]:
        init = cls.__init__
        if init is object.__init__:
            return {}
        try:
            return get_type_hints(init, include_extras=True)
        except (NameError, TypeError):
            return _hints_per_parameter(init)

    def _load_class(self, concrete: Any) -> type[Any] | None:
        if _is_runtime_class(concrete):
            return concrete
        if isinstance(concrete, str):
            return _import_class(concrete)
        return None


def _hints_per_parameter(init: Any) -> dict[str, Any]:
    """Resolve ``init`` annotations one at a time.

    An unresolvable forward reference only drops its own parameter, which is
    then treated as a scalar.
    """
    globalns = getattr(init, "__globals__", None)
    hints: dict[str, Any] = {}
    for name, annotation in getattr(init, "__annotations__", {}).items():

        def holder() -> None: ...

        holder.__annotations__ = {name: annotation}
        try:
            hints.update(get_type_hints(holder, globalns=globalns, include_extras=True))
        except (NameError, TypeError):
            continue
    return hints


def _import_class(path: str) -> type[Any] | None:
    if ":" in path:
        module_name, _, qualname = path.partition(":")
    else:
        module_name, _, qualname = path.rpartition(".")
    if not module_name or not qualname:
        return None

    try:
        module = importlib.import_module(module_name)
    except ModuleNotFoundError as e:
        # Only a missing target module means "not a class path"; a module that
        # fails on its own imports is a real error.
        if e.name is not None and (module_name + ".").startswith(e.name + "."):
            return None
        raise

    target: Any = module
    for part in qualname.split("."):
        target = getattr(target, part, None)
        if target is None:
            return None
    return target if _is_runtime_class(target) else None


@dataclass(frozen=True, slots=True)
class _DeclaredShape:
    constructor: Callable[..., Any]
    parameters: tuple[ConstructorParameter, ...]


class DeclaredTypeDescriptor:
    """Describe constructible keys from explicitly declared constructor shapes.

    Nothing is reflected: a key is constructible only after ``declare`` and
    its dependencies are passed positionally in declared order.

    Example:
        descriptor = DeclaredTypeDescriptor()
        descriptor.declare(Transport).declare(Templates)
        descriptor.declare(Mailer, Transport, Templates)
        descriptor.declare("clock", constructor=SystemClock)
        container = Container(type_descriptor=descriptor)

    """

    def __init__(self) -> None:
        self._shapes: dict[Hashable, _DeclaredShape] = {}

    def declare(
        self,
        concrete: Hashable,
        *dependencies: Hashable | None,
        constructor: Callable[..., Any] | None = None,
    ) -> Self:
        """Declare how ``concrete`` is constructed.

        Args:
            concrete: Key being described.
            dependencies: Keys resolved for each constructor argument, in order.
                ``None`` marks an argument the container cannot supply.
            constructor: Callable invoked with the resolved arguments. Defaults
                to ``concrete`` itself when it is callable.

        """
        if constructor is None:
            if not callable(concrete):
                msg = f"A constructor is required to declare non-callable key {concrete!r}."
                raise TypeError(msg)
            constructor = concrete
        self._shapes[concrete] = _DeclaredShape(
            constructor=constructor,
            parameters=tuple(
                ConstructorParameter(name=f"arg{index}", dependency=dependency, positional_only=True)
                for index, dependency in enumerate(dependencies)
            ),
        )
        return self

    def is_constructible(self, concrete: Any) -> bool:
        return concrete in self._shapes

    def constructor_parameters(self, concrete: Any) -> tuple[ConstructorParameter, ...]:
        return self._shape(concrete).parameters

    def load(self, concrete: Any) -> Callable[..., Any]:
        return self._shape(concrete).constructor

    def _shape(self, concrete: Any) -> _DeclaredShape:
        shape = self._shapes.get(concrete)
        if shape is None:
            raise BindwireNotInstantiableError(concrete)
        return shape
