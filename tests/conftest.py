"""Shared pytest fixtures for bindwire tests."""

import pytest

from bindwire.container import Container
from bindwire.introspection import DeclaredTypeDescriptor, InspectTypeDescriptor


@pytest.fixture()
def container() -> Container:
    """Default container with cycle detection enabled."""
    return Container()


@pytest.fixture()
def container_without_cycle_detection() -> Container:
    """Container with detect_cycles=False."""
    return Container(detect_cycles=False)


@pytest.fixture()
def type_descriptor() -> InspectTypeDescriptor:
    """InspectTypeDescriptor instance."""
    return InspectTypeDescriptor()


@pytest.fixture()
def declared_descriptor() -> DeclaredTypeDescriptor:
    """Empty DeclaredTypeDescriptor instance."""
    return DeclaredTypeDescriptor()
