from __future__ import annotations

from collections.abc import Hashable, Iterator
from contextlib import contextmanager

from bindwire.exceptions import BindwireCircularDependencyError


class ResolutionStack:
    """Track the keys currently being resolved by one container.

    Resolution is synchronous and recursive, so a key that shows up again
    while it is still on the stack can only mean a dependency cycle.
    """

    __slots__ = ("_keys",)

    def __init__(self) -> None:
        self._keys: list[Hashable] = []

    @contextmanager
    def track(self, key: Hashable) -> Iterator[None]:
        """Push ``key`` for the duration of the block.

        Raises:
            BindwireCircularDependencyError: If ``key`` is already being resolved.

        """
        if key in self._keys:
            raise BindwireCircularDependencyError(key, [*self._keys, key])

        self._keys.append(key)
        try:
            yield
        finally:
            self._keys.pop()
