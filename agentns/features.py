"""
This module defines all agentns features using a unified registry system.
The CLI and the HTTP API both dispatch through it.
"""

from typing import (
    Dict,
    Any,
    Callable,
    Iterable,
    Optional,
    TextIO,
    TypeVar,
    Generic,
)
from dataclasses import dataclass
import io
import logging

from agentns.config import InterpreterConfig
from agentns.datamodel import MemoryDataModel
from agentns.document import DocumentError, load_document, parse_document
from agentns.errors import ActionError
from agentns.host import Interpreter
from agentns.namespaces.registry import NamespaceRegistry
from agentns.stores import EnvironmentStore, KeyValueStore, MemoryStore

logger = logging.getLogger("agentns.features")

T = TypeVar("T")


class OperationResult(Generic[T]):
    """Wrapper for operation results with success/error handling"""

    def __init__(
        self,
        success: bool,
        data: Optional[T] = None,
        error: Optional[str] = None,
    ):
        self.success = success
        self.data = data
        self.error = error

    @classmethod
    def ok(cls, data: Optional[T] = None) -> "OperationResult[T]":
        return cls(success=True, data=data)

    @classmethod
    def fail(cls, error: str, data: Optional[T] = None) -> "OperationResult[T]":
        return cls(success=False, data=data, error=error)


@dataclass
class Feature:
    """A named operation exposed by the CLI and the API"""

    name: str
    description: str
    handler: Callable
    cli_options: Optional[Dict[str, Any]] = None
    api_endpoint: Optional[Dict[str, Any]] = None


class FeatureRegistry:
    """Registry for all agentns features"""

    _features: Dict[str, Feature] = {}

    @classmethod
    def register(cls, feature: Feature) -> Feature:
        """Register a new feature"""
        cls._features[feature.name] = feature
        return feature

    @classmethod
    def get_feature(cls, name: str) -> Optional[Feature]:
        """Get a feature by name"""
        return cls._features.get(name)

    @classmethod
    def get_all_features(cls) -> Dict[str, Feature]:
        """Get all registered features"""
        return cls._features.copy()


# ----------------- Feature Handlers -----------------


def handle_version(**kwargs) -> OperationResult[Dict[str, str]]:
    """Handle version request"""
    from agentns.version import get_version

    return OperationResult.ok({"version": get_version()})


def handle_run(
    document: Optional[str] = None,
    filename: Optional[str] = None,
    input: Optional[Iterable[str]] = None,
    input_stream: Optional[TextIO] = None,
    prompt_stream: Optional[TextIO] = None,
    environment: Optional[Dict[str, str]] = None,
    process_environment: bool = False,
    config: Optional[InterpreterConfig] = None,
    **kwargs,
) -> OperationResult[Dict[str, Any]]:
    """Run a document to completion.

    ``input`` lines (or ``input_stream``) feed stdin:read; without either the
    process stdin is used. With ``process_environment`` env actions touch
    the real environment (seeded with ``environment``), otherwise an
    in-memory store holding ``environment``.
    """
    try:
        if document:
            doc = parse_document(document, source=filename)
        elif filename:
            doc = load_document(filename)
        else:
            return OperationResult.fail("Either document content or filename must be provided")
    except (DocumentError, OSError) as exc:
        return OperationResult.fail(f"Failed to load document: {exc}")

    store: KeyValueStore
    if process_environment:
        store = EnvironmentStore()
        for key, value in (environment or {}).items():
            store.set(key, value)
    else:
        store = MemoryStore(environment)

    if input_stream is None and input is not None:
        input_stream = io.StringIO("".join(f"{line}\n" for line in input))

    registry = NamespaceRegistry.discover(
        store=store, input_stream=input_stream, prompt_stream=prompt_stream
    )
    datamodel = MemoryDataModel()
    interpreter = Interpreter(
        registry, doc, datamodel=datamodel, config=config or InterpreterConfig.from_env()
    )

    error: Optional[ActionError] = None
    with interpreter:
        try:
            interpreter.run()
        except ActionError as exc:
            logger.error("Execution failed: %s", exc)
            error = exc
        loaded = interpreter.loaded_namespaces

    result: Dict[str, Any] = {
        "variables": datamodel.snapshot(),
        "logs": [{"label": label, "message": message} for label, message in interpreter.logs],
        "namespaces": loaded,
    }
    if isinstance(store, MemoryStore):
        result["environment"] = dict(store.values)

    if error is not None:
        result["error"] = error.payload()
        return OperationResult.fail(str(error), data=result)
    return OperationResult.ok(result)


def handle_list_namespaces(**kwargs) -> OperationResult[Dict[str, Any]]:
    """Handle listing available namespaces"""
    try:
        registry = NamespaceRegistry.discover()
        return OperationResult.ok({"namespaces": registry.describe()})
    except Exception as e:
        return OperationResult.fail(f"Failed to list namespaces: {str(e)}")


# Register all features
version_feature = FeatureRegistry.register(
    Feature(
        name="version",
        description="Get the agentns version",
        handler=handle_version,
        api_endpoint={"path": "/version", "methods": ["GET"]},
    )
)

run_feature = FeatureRegistry.register(
    Feature(
        name="run",
        description="Run a document through the namespace interpreter",
        handler=handle_run,
        cli_options={"filename": {"help": "Document to run"}},
        api_endpoint={"path": "/run", "methods": ["POST"]},
    )
)

list_namespaces_feature = FeatureRegistry.register(
    Feature(
        name="list-namespaces",
        description="List the registered namespaces",
        handler=handle_list_namespaces,
        api_endpoint={"path": "/namespaces", "methods": ["GET"]},
    )
)
