"""Namespace URI -> loader registry with deterministic discovery."""

from __future__ import annotations

from collections import OrderedDict
from pathlib import Path
from typing import Any, Callable, Iterator, Mapping, Optional
import importlib
import inspect
import logging

from agentns.namespaces.api import Interpreter, Namespace, NamespaceLoader

logger = logging.getLogger(__name__)

_PACKAGE = "agentns.namespaces"


class NamespaceRegistry:
    """Maps namespace URIs to loaders.

    Built once while configuring an interpreter, then frozen; a frozen
    registry rejects further registrations.
    """

    def __init__(self, loaders: Optional[Mapping[str, NamespaceLoader]] = None) -> None:
        self._loaders: OrderedDict[str, NamespaceLoader] = OrderedDict()
        self._descriptions: dict[str, str] = {}
        self._frozen = False
        for uri, loader in (loaders or {}).items():
            self.register(uri, loader)

    @property
    def frozen(self) -> bool:
        return self._frozen

    def freeze(self) -> "NamespaceRegistry":
        self._frozen = True
        return self

    def register(self, uri: str, loader: NamespaceLoader, description: str = "") -> None:
        if self._frozen:
            raise RuntimeError(f"Registry is frozen; cannot register {uri}")
        if not uri:
            raise ValueError("Namespace URI cannot be empty")
        if not callable(loader):
            raise TypeError(f"Loader for {uri} must be callable")
        if uri in self._loaders:
            raise ValueError(f"Namespace already registered: {uri}")
        self._loaders[uri] = loader
        self._descriptions[uri] = description

    def get(self, uri: str) -> Optional[NamespaceLoader]:
        return self._loaders.get(uri)

    def __contains__(self, uri: object) -> bool:
        return uri in self._loaders

    def __len__(self) -> int:
        return len(self._loaders)

    def __iter__(self) -> Iterator[str]:
        return iter(self._loaders)

    def uris(self) -> list[str]:
        return list(self._loaders)

    def items(self) -> list[tuple[str, NamespaceLoader]]:
        return list(self._loaders.items())

    def describe(self) -> dict[str, str]:
        return {uri: self._descriptions.get(uri) or "Namespace" for uri in self._loaders}

    def load(self, uri: str, interpreter: Interpreter, document: Any) -> Namespace:
        """Construct the module for ``uri`` bound to ``interpreter``."""
        loader = self._loaders.get(uri)
        if loader is None:
            raise KeyError(f"Unknown namespace: {uri}")
        module = loader(interpreter, document)
        if not isinstance(module, Namespace):
            raise TypeError(f"Loader for {uri} returned {type(module).__name__}, not a Namespace")
        if module.uri != uri:
            raise ValueError(f"Loader for {uri} returned a module for {module.uri}")
        return module

    @classmethod
    def discover(cls, namespaces_dir: Optional[Path] = None, **options: Any) -> "NamespaceRegistry":
        """Register every namespace package under ``agentns.namespaces``.

        Each package exposes ``NAMESPACE_URI`` and a ``loader(...)`` factory;
        ``options`` are passed to the factories that accept them. Packages are
        visited in name order. The returned registry is frozen.
        """
        if namespaces_dir is None:
            namespaces_dir = Path(__file__).parent

        registry = cls()
        for item in sorted(namespaces_dir.iterdir(), key=lambda p: p.name):
            if not item.is_dir() or item.name.startswith("_"):
                continue
            if not (item / "__init__.py").exists():
                continue
            module_name = f"{_PACKAGE}.{item.name}"
            try:
                package = importlib.import_module(module_name)
            except Exception as exc:  # noqa: BLE001
                logger.warning("Failed loading namespace package %s: %s", module_name, exc)
                continue

            uri = getattr(package, "NAMESPACE_URI", None)
            factory = getattr(package, "loader", None)
            if not uri or not callable(factory):
                logger.debug("Skipping %s: no NAMESPACE_URI/loader", module_name)
                continue

            loader = factory(**_accepted_options(factory, options))
            registry.register(uri, loader, description=_first_doc_line(package))
        return registry.freeze()


def _accepted_options(factory: Callable[..., Any], options: Mapping[str, Any]) -> dict[str, Any]:
    signature = inspect.signature(factory)
    if any(p.kind == inspect.Parameter.VAR_KEYWORD for p in signature.parameters.values()):
        return dict(options)
    return {key: value for key, value in options.items() if key in signature.parameters}


def _first_doc_line(module: Any) -> str:
    doc = (getattr(module, "__doc__", None) or "").strip()
    return doc.split("\n")[0] if doc else ""


def all_loaders(**options: Any) -> dict[str, NamespaceLoader]:
    """Loaders for every bundled namespace, keyed by URI."""
    return dict(NamespaceRegistry.discover(**options).items())


def list_namespaces() -> dict[str, str]:
    """Bundled namespace URIs with their one-line descriptions."""
    return NamespaceRegistry.discover().describe()
