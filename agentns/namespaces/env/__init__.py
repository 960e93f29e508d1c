"""Process environment access (env:get, env:set)."""

from __future__ import annotations

from typing import Any, Optional
import logging

from agentns.namespaces.api import HandleResult, Interpreter, NamespaceLoader, dispatch
from agentns.namespaces.env import get as get_action, set as set_action
from agentns.stores import EnvironmentStore, KeyValueStore

NAMESPACE_URI = "github.com/agentflare-ai/agentml/env"

logger = logging.getLogger("agentns.namespaces.env")


class EnvNamespace:
    def __init__(self, interpreter: Interpreter, store: KeyValueStore) -> None:
        self.interpreter = interpreter
        self.store = store
        self._unloaded = False
        self._routes = {
            "get": lambda element: get_action.execute(self.interpreter, self.store, element),
            "set": lambda element: set_action.execute(self.interpreter, self.store, element),
        }

    @property
    def uri(self) -> str:
        return NAMESPACE_URI

    def handle(self, element) -> HandleResult:
        if self._unloaded:
            raise RuntimeError("env namespace used after unload")
        return dispatch("env", element, self._routes)

    def unload(self) -> None:
        self._unloaded = True


def loader(store: Optional[KeyValueStore] = None) -> NamespaceLoader:
    """Loader for the env namespace; ``store`` defaults to the process environment."""

    def _load(interpreter: Interpreter, document: Any) -> EnvNamespace:
        return EnvNamespace(interpreter, store if store is not None else EnvironmentStore())

    return _load
