"""Stable namespace API contracts.

A namespace module is anything exposing ``uri``, ``handle(element)`` and
``unload()``; a loader is a plain callable building one for an interpreter.
The interpreter, data model and element are consumed through the narrow
protocols below rather than concrete classes.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Callable, Mapping, Optional, Protocol, runtime_checkable
import logging

from agentns.errors import ActionError, ErrorKind

logger = logging.getLogger("agentns.namespaces")


@runtime_checkable
class Element(Protocol):
    @property
    def local_name(self) -> str: ...

    @property
    def tag_name(self) -> str: ...

    def get_attribute(self, name: str) -> str: ...

    def attributes(self) -> list[tuple[str, str]]: ...

    def children(self) -> list["Element"]: ...


@runtime_checkable
class DataModel(Protocol):
    def evaluate_value(self, expression: str) -> Any: ...

    def set_variable(self, location: str, value: Any) -> None: ...


@runtime_checkable
class Interpreter(Protocol):
    def log(self, label: str, message: str) -> None: ...

    def datamodel(self) -> Optional[DataModel]: ...

    def execute_element(self, element: Element) -> None:
        """Execute an element; raises on failure."""


@dataclass(frozen=True)
class HandleResult:
    """Outcome of ``Namespace.handle``.

    ``handled=False, error=None`` means the module does not own the element
    and the interpreter should continue default processing.
    """

    handled: bool
    error: Optional[ActionError] = None

    @property
    def ok(self) -> bool:
        return self.error is None


NOT_HANDLED = HandleResult(handled=False)


@runtime_checkable
class Namespace(Protocol):
    @property
    def uri(self) -> str: ...

    def handle(self, element: Optional[Element]) -> HandleResult: ...

    def unload(self) -> None: ...


# (interpreter, document) -> Namespace
NamespaceLoader = Callable[[Interpreter, Any], Namespace]
Action = Callable[[Element], None]


def invalid_element(label: str) -> HandleResult:
    return HandleResult(
        handled=False,
        error=ActionError(
            f"{label}: element cannot be None",
            kind=ErrorKind.INVALID_ELEMENT,
            data={"namespace": label},
        ),
    )


def dispatch(label: str, element: Optional[Element], routes: Mapping[str, Action]) -> HandleResult:
    """Route ``element`` to the action registered for its local name.

    Local names are matched case-insensitively. A matched action always
    claims the element, even when it fails.
    """
    if element is None:
        return invalid_element(label)

    action = routes.get(element.local_name.lower())
    if action is None:
        return NOT_HANDLED

    try:
        action(element)
    except ActionError as exc:
        logger.debug("%s:%s failed: %s", label, element.local_name, exc)
        return HandleResult(handled=True, error=exc)
    return HandleResult(handled=True)
