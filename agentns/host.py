"""
Reference host interpreter.

Walks a document and hands each element to the namespace module registered
for its URI. It implements no state-chart semantics: elements nobody claims
just have their children executed in order.
"""

from __future__ import annotations

from typing import Optional
import logging

from agentns.config import InterpreterConfig
from agentns.document import Document, Element
from agentns.namespaces.api import DataModel, HandleResult, Namespace
from agentns.namespaces.registry import NamespaceRegistry

logger = logging.getLogger("agentns.host")

VERBOSE_LEVEL = 15  # Between INFO (20) and DEBUG (10)
logging.addLevelName(VERBOSE_LEVEL, "VERBOSE")


class Interpreter:
    """One document session. Modules are loaded lazily, once, and unloaded on close."""

    def __init__(
        self,
        registry: NamespaceRegistry,
        document: Document,
        datamodel: Optional[DataModel] = None,
        config: Optional[InterpreterConfig] = None,
    ) -> None:
        self.registry = registry
        self.document = document
        self.config = config or InterpreterConfig()
        self.logs: list[tuple[str, str]] = []
        self._datamodel = datamodel
        self._modules: dict[str, Namespace] = {}
        self._closed = False

    def __enter__(self) -> "Interpreter":
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.close()

    def datamodel(self) -> Optional[DataModel]:
        return self._datamodel

    def log(self, label: str, message: str) -> None:
        self.logs.append((label, message))
        logger.info("[%s] %s", label, message)

    @property
    def loaded_namespaces(self) -> list[str]:
        return list(self._modules)

    def namespace(self, uri: str) -> Optional[Namespace]:
        """The module for ``uri``, loading it on first use; None if unavailable."""
        if self._closed:
            raise RuntimeError("Interpreter is closed")
        module = self._modules.get(uri)
        if module is not None:
            return module
        if uri not in self.registry or not self.config.is_enabled(uri):
            return None
        module = self.registry.load(uri, self, self.document)
        self._modules[uri] = module
        logger.debug("Loaded namespace %s", uri)
        return module

    def execute_element(self, element: Element) -> None:
        """Execute ``element``; raises the ActionError of a failing module."""
        uri = element.namespace_uri
        module = self.namespace(uri) if uri else None

        if module is not None:
            if self._claimed(module.handle(element)):
                logger.log(VERBOSE_LEVEL, "%s handled by %s", element.tag_name, module.uri)
                return
        else:
            for pass_uri in self.config.default_pass:
                pass_module = self.namespace(pass_uri)
                if pass_module is not None and self._claimed(pass_module.handle(element)):
                    logger.log(VERBOSE_LEVEL, "%s handled by %s", element.tag_name, pass_uri)
                    return

        for child in element.children():
            self.execute_element(child)

    def _claimed(self, result: HandleResult) -> bool:
        if result.error is not None:
            raise result.error
        return result.handled

    def run(self) -> None:
        source = self.document.source or "<document>"
        logger.log(VERBOSE_LEVEL, "Running %s", source)
        self.execute_element(self.document.root)
        logger.log(VERBOSE_LEVEL, "Finished %s (namespaces: %s)", source, ", ".join(self._modules) or "none")

    def close(self) -> None:
        """Unload every loaded module exactly once."""
        if self._closed:
            return
        self._closed = True
        first_error: Optional[Exception] = None
        for uri, module in self._modules.items():
            try:
                module.unload()
            except Exception as exc:  # noqa: BLE001
                logger.error("Failed to unload namespace %s: %s", uri, exc)
                if first_error is None:
                    first_error = exc
        self._modules.clear()
        if first_error is not None:
            raise first_error
