from bindwire.bindings import Binding, share
from bindwire.container import Container
from bindwire.exceptions import (
    BindwireCircularDependencyError,
    BindwireError,
    BindwireInvalidBindingError,
    BindwireNotBoundError,
    BindwireNotInstantiableError,
    BindwireUnresolvableDependencyError,
)
from bindwire.introspection import (
    ConstructorParameter,
    DeclaredTypeDescriptor,
    InspectTypeDescriptor,
    TypeDescriptor,
)

__all__ = [
    "Binding",
    "BindwireCircularDependencyError",
    "BindwireError",
    "BindwireInvalidBindingError",
    "BindwireNotBoundError",
    "BindwireNotInstantiableError",
    "BindwireUnresolvableDependencyError",
    "ConstructorParameter",
    "Container",
    "DeclaredTypeDescriptor",
    "InspectTypeDescriptor",
    "TypeDescriptor",
    "share",
]
