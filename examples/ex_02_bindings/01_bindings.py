"""Bindings: interfaces, shared bindings, instances, aliases, and mapping sugar.

1. Bind a protocol to an implementation and let auto-wiring inject it.
2. Register a shared binding with a short alias.
3. Seed an existing value with ``instance``.
4. Use ``container[key] = value`` for plain values.
"""

from __future__ import annotations

from typing import Protocol

from bindwire import Container


class Clock(Protocol):
    def today(self) -> str: ...


class FixedClock:
    def today(self) -> str:
        return "2024-01-01"


class Greeter:
    def __init__(self, clock: Clock) -> None:
        self.clock = clock


class Settings:
    def __init__(self) -> None:
        self.debug = False


def main() -> None:
    container = Container()

    container.bind(Clock, FixedClock)
    print(f"today={container.make(Greeter).clock.today()}")  # => today=2024-01-01

    transient_same = container.make(Clock) is container.make(Clock)
    print(f"transient_same={transient_same}")  # => transient_same=False

    container.singleton({Settings: "settings"})
    shared_same = container.make("settings") is container.make(Settings)
    print(f"shared_same={shared_same}")  # => shared_same=True

    container.instance("app.name", "billing")
    print(f"app_name={container.make('app.name')}")  # => app_name=billing

    container["greeting"] = "hello"
    print(f"greeting={container['greeting']} bound={'greeting' in container}")  # => greeting=hello bound=True


if __name__ == "__main__":
    main()
