from __future__ import annotations

from collections.abc import Hashable, Mapping
from typing import Any

import pytest

from bindwire.container import Container


@pytest.fixture()
def bindwire_bindings() -> Mapping[Hashable, Any]:
    """Provide initial ``abstract -> concrete`` bindings for ``bindwire_container``.

    Override this fixture in a test module or ``conftest.py`` to swap
    implementations for a group of tests without touching the container
    fixture itself.

    Returns:
        An empty mapping.

    """
    return {}


@pytest.fixture()
def bindwire_container(bindwire_bindings: Mapping[Hashable, Any]) -> Container:
    """Create a per-test container seeded with ``bindwire_bindings``.

    The fixture is function-scoped, so registrations are isolated between tests
    unless users override fixture scope explicitly.

    Returns:
        A new ``Container`` instance.

    """
    return Container(bindwire_bindings)
