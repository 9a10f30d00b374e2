"""Decorators: wrap an existing binding with ``extend``.

Each ``extend`` call wraps the previous factory, so the first registered
decorator is the innermost one.
"""

from __future__ import annotations

from typing import Protocol

from bindwire import Container


class Mailer(Protocol):
    def send(self, to: str) -> str: ...


class SmtpMailer:
    def send(self, to: str) -> str:
        return f"smtp:{to}"


class LoggingMailer:
    def __init__(self, inner: Mailer) -> None:
        self.inner = inner

    def send(self, to: str) -> str:
        return f"log({self.inner.send(to)})"


class RetryingMailer:
    def __init__(self, inner: Mailer) -> None:
        self.inner = inner

    def send(self, to: str) -> str:
        return f"retry({self.inner.send(to)})"


def main() -> None:
    container = Container()
    container.bind(Mailer, SmtpMailer)

    container.extend(Mailer, lambda inner, c: LoggingMailer(inner))

    @container.extending(Mailer)
    def add_retries(inner: Mailer, c: Container) -> Mailer:
        return RetryingMailer(inner)

    print(f"sent={container.make(Mailer).send('ana')}")  # => sent=retry(log(smtp:ana))


if __name__ == "__main__":
    main()
