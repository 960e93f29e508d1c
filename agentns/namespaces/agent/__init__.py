"""Agent document root (agent:agent) and transition event schemas."""

from __future__ import annotations

from typing import Any

from agentns.namespaces.api import (
    NOT_HANDLED,
    HandleResult,
    Interpreter,
    NamespaceLoader,
    dispatch,
    invalid_element,
)
from agentns.namespaces.agent import root, schemas

NAMESPACE_URI = "github.com/agentflare-ai/agentml/agent"


class AgentNamespace:
    """Handles the ``agent`` root element.

    The interpreter also offers this module elements from the default
    namespace; ``transition`` elements there get their ``event:schema``
    logged and are left to default processing.
    """

    def __init__(self, interpreter: Interpreter, document: Any) -> None:
        self.interpreter = interpreter
        self.document = document
        self.aliases: dict[str, str] = {}
        self.schemas: dict[str, str] = {}
        self._unloaded = False
        self._routes = {
            "agent": lambda element: root.execute(self, element),
        }

    @property
    def uri(self) -> str:
        return NAMESPACE_URI

    def handle(self, element) -> HandleResult:
        if self._unloaded:
            raise RuntimeError("agent namespace used after unload")
        if element is None:
            return invalid_element("agent")
        if element.local_name.lower() == "transition":
            schemas.log_transition(self.interpreter, element)
            return NOT_HANDLED
        return dispatch("agent", element, self._routes)

    def unload(self) -> None:
        self._unloaded = True


def loader() -> NamespaceLoader:
    def _load(interpreter: Interpreter, document: Any) -> AgentNamespace:
        return AgentNamespace(interpreter, document)

    return _load
