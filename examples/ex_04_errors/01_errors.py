"""Errors: what the container raises and why.

All errors derive from ``BindwireError``.
"""

from __future__ import annotations

from typing import Protocol

from bindwire import (
    BindwireCircularDependencyError,
    BindwireNotBoundError,
    BindwireNotInstantiableError,
    BindwireUnresolvableDependencyError,
    Container,
)


class Mailer(Protocol):
    def send(self, to: str) -> str: ...


class Report:
    def __init__(self, title: str) -> None:
        self.title = title


class Chicken:
    def __init__(self, egg: Egg) -> None:
        self.egg = egg


class Egg:
    def __init__(self, chicken: Chicken) -> None:
        self.chicken = chicken


def main() -> None:
    container = Container()

    try:
        container.make(Mailer)
    except BindwireNotInstantiableError as error:
        print(error)  # => Target [Mailer] is not instantiable.

    try:
        container.make(Report)
    except BindwireUnresolvableDependencyError as error:
        print(error)  # => Unresolvable dependency resolving parameter 'title' of [Report].

    try:
        container.make(Chicken)
    except BindwireCircularDependencyError as error:
        print(error)  # => Circular dependency detected: Chicken -> Egg -> Chicken

    try:
        container.extend("mailer", lambda inner, c: inner)
    except BindwireNotBoundError as error:
        print(error)  # => Type mailer is not bound.


if __name__ == "__main__":
    main()
