"""Interpreter configuration."""

from __future__ import annotations

from typing import Mapping, Optional
import os

from pydantic import BaseModel, Field

from agentns.namespaces.agent import NAMESPACE_URI as AGENT_NAMESPACE_URI

NAMESPACES_ENV = "AGENTNS_NAMESPACES"
DEFAULT_PASS_ENV = "AGENTNS_DEFAULT_PASS"


class InterpreterConfig(BaseModel):
    """Which namespaces an interpreter loads.

    ``namespaces`` restricts loading to the listed URIs (``None`` enables
    every registered namespace). ``default_pass`` lists the modules offered
    elements whose namespace has no registered loader, before default
    processing.
    """

    namespaces: Optional[list[str]] = None
    default_pass: list[str] = Field(default_factory=lambda: [AGENT_NAMESPACE_URI])

    def is_enabled(self, uri: str) -> bool:
        return self.namespaces is None or uri in self.namespaces

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "InterpreterConfig":
        environ = os.environ if environ is None else environ
        values: dict[str, list[str]] = {}

        namespaces = _split_list(environ.get(NAMESPACES_ENV, ""))
        if namespaces:
            values["namespaces"] = namespaces

        if DEFAULT_PASS_ENV in environ:
            values["default_pass"] = _split_list(environ[DEFAULT_PASS_ENV])
        return cls(**values)


def _split_list(raw: str) -> list[str]:
    items: list[str] = []
    for token in raw.split(","):
        stripped = token.strip()
        if stripped and stripped not in items:
            items.append(stripped)
    return items
