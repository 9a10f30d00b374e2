import logging
from abc import ABC, abstractmethod
from collections import Counter, OrderedDict
from typing import Annotated, Protocol

import pytest

from bindwire.container import Container
from bindwire.exceptions import (
    BindwireNotInstantiableError,
    BindwireUnresolvableDependencyError,
)


class ConcreteStub:
    pass


class ContractStub(ABC):
    @abstractmethod
    def handle(self) -> str: ...


class ImplementationStub(ContractStub):
    def handle(self) -> str:
        return "implementation"


class OtherImplementationStub(ContractStub):
    def handle(self) -> str:
        return "other"


class DependentStub:
    def __init__(self, impl: ContractStub) -> None:
        self.impl = impl


class NestedDependentStub:
    def __init__(self, inner: DependentStub) -> None:
        self.inner = inner


class ServiceA:
    pass


class ServiceB:
    def __init__(self, service_a: ServiceA) -> None:
        self.service_a = service_a


class ServiceC:
    def __init__(self, service_b: ServiceB) -> None:
        self.service_b = service_b


class ClockProtocol(Protocol):
    def now(self) -> float: ...


class ScalarDependentStub:
    def __init__(self, service_a: ServiceA, name: str) -> None:
        self.service_a = service_a
        self.name = name


class UntypedDependentStub:
    def __init__(self, anything) -> None:  # type: ignore[no-untyped-def]
        self.anything = anything


class DefaultedScalarStub:
    def __init__(self, service_a: ServiceA, name: str = "default", retries: int = 3) -> None:
        self.service_a = service_a
        self.name = name
        self.retries = retries


class OptionalContractStub:
    def __init__(self, impl: ContractStub | None = None) -> None:
        self.impl = impl


class DefaultedContractStub:
    def __init__(self, impl: ContractStub = ImplementationStub()) -> None:  # noqa: B008
        self.impl = impl


class DefaultedDependentStub:
    def __init__(
        self,
        inner: DependentStub = DependentStub(ImplementationStub()),  # noqa: B008
    ) -> None:
        self.inner = inner


class PartiallyResolvableStub:
    def __init__(
        self,
        service_a: "ServiceA",
        missing: "UndefinedServiceType" = None,  # type: ignore[assignment] # noqa: F821
    ) -> None:
        self.service_a = service_a
        self.missing = missing


class AnnotatedDependentStub:
    def __init__(self, service_a: Annotated[ServiceA, "primary"]) -> None:
        self.service_a = service_a


class KeywordOnlyStub:
    def __init__(self, *, service_a: ServiceA, service_b: ServiceB) -> None:
        self.service_a = service_a
        self.service_b = service_b


class PositionalOnlyStub:
    def __init__(self, service_a: ServiceA, /, service_b: ServiceB) -> None:
        self.service_a = service_a
        self.service_b = service_b


class VariadicStub:
    def __init__(self, service_a: ServiceA, *args: object, **kwargs: object) -> None:
        self.service_a = service_a
        self.args = args
        self.kwargs = kwargs


class ContainerAwareStub:
    def __init__(self, container: Container) -> None:
        self.container = container


def test_closure_resolution(container: Container) -> None:
    container.bind("name", lambda c: "Taylor")

    assert container.make("name") == "Taylor"


def test_container_is_passed_to_factories(container: Container) -> None:
    container.bind("something", lambda c: c)

    assert container.make("something") is container


def test_non_shared_binding_returns_fresh_instances(container: Container) -> None:
    container.bind("list", lambda c: [])

    first = container.make("list")
    second = container.make("list")

    assert first == second
    assert first is not second


def test_shared_closure_resolution(container: Container) -> None:
    value = object()
    container.singleton("class", lambda c: value)

    assert container.make("class") is value


def test_shared_binding_builds_once(container: Container) -> None:
    calls: list[int] = []

    def factory(c: Container) -> object:
        calls.append(1)
        return object()

    container.singleton("service", factory)

    first = container.make("service")
    second = container.make("service")

    assert first is second
    assert len(calls) == 1


def test_auto_concrete_resolution(container: Container) -> None:
    assert isinstance(container.make(ConcreteStub), ConcreteStub)


def test_auto_concrete_resolution_is_not_cached(container: Container) -> None:
    assert container.make(ConcreteStub) is not container.make(ConcreteStub)


def test_shared_concrete_resolution(container: Container) -> None:
    container.singleton(ConcreteStub)

    first = container.make(ConcreteStub)
    second = container.make(ConcreteStub)

    assert isinstance(first, ConcreteStub)
    assert first is second


def test_abstract_to_concrete_resolution(container: Container) -> None:
    container.bind(ContractStub, ImplementationStub)

    instance = container.make(DependentStub)

    assert isinstance(instance.impl, ImplementationStub)


def test_nested_dependency_resolution(container: Container) -> None:
    container.bind(ContractStub, ImplementationStub)

    instance = container.make(NestedDependentStub)

    assert isinstance(instance.inner, DependentStub)
    assert isinstance(instance.inner.impl, ImplementationStub)


def test_auto_wires_unbound_dependency_chain(container: Container) -> None:
    instance = container.make(ServiceC)

    assert isinstance(instance, ServiceC)
    assert isinstance(instance.service_b, ServiceB)
    assert isinstance(instance.service_b.service_a, ServiceA)


def test_cross_binding_honors_target_binding(container: Container) -> None:
    container.singleton(ImplementationStub)
    container.bind(ContractStub, ImplementationStub)

    first = container.make(ContractStub)
    second = container.make(ContractStub)

    assert isinstance(first, ImplementationStub)
    assert first is second


def test_shared_cross_binding_is_cached_under_abstract(container: Container) -> None:
    container.singleton(ContractStub, ImplementationStub)

    assert container.make(ContractStub) is container.make(ContractStub)
    assert container.make(ImplementationStub) is not container.make(ImplementationStub)


def test_last_bind_wins(container: Container) -> None:
    container.bind(ContractStub, ImplementationStub)
    container.bind(ContractStub, OtherImplementationStub)

    assert isinstance(container.make(ContractStub), OtherImplementationStub)


def test_string_key_bound_to_class(container: Container) -> None:
    container.bind("contract", ImplementationStub)

    assert isinstance(container.make("contract"), ImplementationStub)


def test_string_key_bound_to_string_key(container: Container) -> None:
    container.bind("greeting", lambda c: "hello")
    container.bind("salutation", "greeting")

    assert container.make("salutation") == "hello"


def test_dotted_path_string_is_imported(container: Container) -> None:
    assert isinstance(container.make("collections.OrderedDict"), OrderedDict)
    assert isinstance(container.make("collections:Counter"), Counter)


def test_bind_to_dotted_path_string(container: Container) -> None:
    container.bind("counter", "collections.Counter")

    assert container.make("counter") == Counter()


def test_container_resolves_itself(container: Container) -> None:
    assert container.make(Container) is container


def test_auto_wired_class_receives_container(container: Container) -> None:
    instance = container.make(ContainerAwareStub)

    assert instance.container is container


def test_unbound_abstract_class_is_not_instantiable(container: Container) -> None:
    with pytest.raises(BindwireNotInstantiableError) as exc_info:
        container.make(ContractStub)

    assert exc_info.value.concrete is ContractStub


def test_unbound_protocol_is_not_instantiable(container: Container) -> None:
    with pytest.raises(BindwireNotInstantiableError):
        container.make(ClockProtocol)


def test_unbound_string_is_not_instantiable(container: Container) -> None:
    with pytest.raises(BindwireNotInstantiableError):
        container.make("unknown")


def test_missing_dotted_path_is_not_instantiable(container: Container) -> None:
    with pytest.raises(BindwireNotInstantiableError):
        container.make("bindwire_missing_module.Service")


def test_dependency_on_unbound_abstract_is_not_instantiable(container: Container) -> None:
    with pytest.raises(BindwireNotInstantiableError) as exc_info:
        container.make(DependentStub)

    assert exc_info.value.concrete is ContractStub


def test_scalar_parameter_without_default_is_unresolvable(container: Container) -> None:
    with pytest.raises(BindwireUnresolvableDependencyError) as exc_info:
        container.make(ScalarDependentStub)

    assert exc_info.value.parameter == "name"
    assert exc_info.value.concrete is ScalarDependentStub
    assert "name" in str(exc_info.value)


def test_untyped_parameter_without_default_is_unresolvable(container: Container) -> None:
    with pytest.raises(BindwireUnresolvableDependencyError) as exc_info:
        container.make(UntypedDependentStub)

    assert exc_info.value.parameter == "anything"


def test_scalar_parameters_with_defaults_keep_defaults(container: Container) -> None:
    instance = container.make(DefaultedScalarStub)

    assert isinstance(instance.service_a, ServiceA)
    assert instance.name == "default"
    assert instance.retries == 3


def test_optional_annotation_falls_back_to_default(container: Container) -> None:
    assert container.make(OptionalContractStub).impl is None


def test_unbound_class_parameter_with_default_keeps_default(container: Container) -> None:
    instance = container.make(DefaultedContractStub)

    assert isinstance(instance.impl, ImplementationStub)


def test_default_does_not_hide_failure_deeper_in_the_graph(container: Container) -> None:
    with pytest.raises(BindwireNotInstantiableError) as exc_info:
        container.make(DefaultedDependentStub)

    assert exc_info.value.concrete is ContractStub


def test_unresolvable_forward_reference_only_affects_its_parameter(
    container: Container,
) -> None:
    instance = container.make(PartiallyResolvableStub)

    assert isinstance(instance.service_a, ServiceA)
    assert instance.missing is None


def test_bound_class_parameter_with_default_is_resolved(container: Container) -> None:
    container.bind(ContractStub, OtherImplementationStub)

    instance = container.make(DefaultedContractStub)

    assert isinstance(instance.impl, OtherImplementationStub)


def test_annotated_parameter_is_unwrapped(container: Container) -> None:
    assert isinstance(container.make(AnnotatedDependentStub).service_a, ServiceA)


def test_keyword_only_parameters_are_resolved(container: Container) -> None:
    instance = container.make(KeywordOnlyStub)

    assert isinstance(instance.service_a, ServiceA)
    assert isinstance(instance.service_b, ServiceB)


def test_positional_only_parameters_are_resolved(container: Container) -> None:
    instance = container.make(PositionalOnlyStub)

    assert isinstance(instance.service_a, ServiceA)
    assert isinstance(instance.service_b, ServiceB)


def test_variadic_parameters_are_ignored(container: Container) -> None:
    instance = container.make(VariadicStub)

    assert isinstance(instance.service_a, ServiceA)
    assert instance.args == ()
    assert instance.kwargs == {}


def test_failed_shared_resolution_does_not_cache(container: Container) -> None:
    attempts: list[int] = []

    def factory(c: Container) -> ServiceA:
        attempts.append(1)
        if len(attempts) == 1:
            return c.make(ContractStub)
        return ServiceA()

    container.singleton("service", factory)

    with pytest.raises(BindwireNotInstantiableError):
        container.make("service")

    assert isinstance(container.make("service"), ServiceA)
    assert len(attempts) == 2


def test_build_calls_factory_with_container(container: Container) -> None:
    assert container.build(lambda c: c) is container


def test_build_ignores_bindings(container: Container) -> None:
    container.bind(ConcreteStub, lambda c: "bound")

    assert isinstance(container.build(ConcreteStub), ConcreteStub)


def test_build_does_not_cache(container: Container) -> None:
    container.singleton(ConcreteStub)

    container.build(ConcreteStub)

    assert container.make(ConcreteStub) is container.make(ConcreteStub)
    assert container.build(ConcreteStub) is not container.make(ConcreteStub)


def test_build_unbound_abstract_is_not_instantiable(container: Container) -> None:
    with pytest.raises(BindwireNotInstantiableError):
        container.build(ContractStub)


def test_initial_bindings_are_registered() -> None:
    container = Container({ContractStub: ImplementationStub, "name": lambda c: "Taylor"})

    assert isinstance(container.make(ContractStub), ImplementationStub)
    assert container.make("name") == "Taylor"


def test_containers_do_not_share_state() -> None:
    first = Container()
    second = Container()

    first.bind("name", lambda c: "Taylor")

    assert "name" in first
    assert "name" not in second
    assert second.make(Container) is second


def test_repr_reports_sizes(container: Container) -> None:
    container.bind("name", lambda c: "Taylor")
    container.alias("name", "n")

    assert repr(container) == "Container(bindings=1, instances=1, aliases=1)"


def test_registration_is_logged_at_debug_level(
    container: Container,
    caplog: pytest.LogCaptureFixture,
) -> None:
    with caplog.at_level(logging.DEBUG, logger="bindwire.container"):
        container.singleton("name", lambda c: "Taylor")
        container.make("name")

    assert "Bound name (shared=True)" in caplog.messages
    assert "Cached shared instance of name" in caplog.messages
