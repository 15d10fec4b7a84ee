# src/cloudbucket/hosts.py
"""Inflight hosts: the consumers that resources are bound to."""

from __future__ import annotations

from types import MappingProxyType
from typing import TYPE_CHECKING, Mapping

if TYPE_CHECKING:
    from cloudbucket.app import App
    from cloudbucket.binder import BindingGrant


class InflightHost:
    """
    A construct whose run-time code calls resource clients.

    Binding adds environment entries (how the client finds its resource) and
    grants (what the host's identity may do) to the host.
    """

    def __init__(self, app: App, id: str) -> None:
        self.app = app
        self.id = id
        self.path = f"root/{id}"
        self._environment: dict[str, str] = {}
        self._grants: list[BindingGrant] = []
        self._policy_statements: list[dict[str, object]] = []
        app.register_host(self)

    @property
    def environment(self) -> Mapping[str, str]:
        return MappingProxyType(self._environment)

    @property
    def grants(self) -> tuple[BindingGrant, ...]:
        return tuple(self._grants)

    def add_environment(self, name: str, value: str) -> None:
        existing = self._environment.get(name)
        if existing is not None and existing != value:
            raise ValueError(
                f"Environment variable {name} of {self.path} already set to {existing!r}"
            )
        self._environment[name] = value

    @property
    def policy_statements(self) -> tuple[dict[str, object], ...]:
        """IAM policy statements attached by targets with a policy-document model."""
        return tuple(self._policy_statements)

    def attach_grant(self, grant: BindingGrant) -> None:
        self._grants.append(grant)

    def add_policy_statement(self, statement: dict[str, object]) -> None:
        self._policy_statements.append(statement)

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.path!r})"


class Function(InflightHost):
    """A serverless function; the only host type buckets can currently be bound to."""

    def __init__(self, app: App, id: str, handler: str = "index.handler") -> None:
        super().__init__(app, id)
        self.handler = handler


__all__ = ["InflightHost", "Function"]
