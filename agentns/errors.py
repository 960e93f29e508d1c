"""
Uniform failure shape reported by namespace actions.
"""

from __future__ import annotations

from enum import Enum
from typing import Any, Optional

EXECUTION_EVENT = "error.execution"


class ErrorKind(str, Enum):
    """Classification of action failures."""

    INVALID_ELEMENT = "invalid_element"
    MISSING_DATAMODEL = "missing_datamodel"
    MISSING_PARAMETER = "missing_parameter"
    CONFLICT = "conflict"
    EVALUATION = "evaluation"
    EFFECT = "effect"
    CHILD_FAILED = "child_failed"


class ActionError(Exception):
    """Failure raised by an action, mirrored to the interpreter as a platform event.

    ``data`` is diagnostic context only (element name, resolved attribute
    values); nothing should branch on it. ``cause`` keeps the original
    exception and is also chained as ``__cause__``.
    """

    def __init__(
        self,
        message: str,
        kind: ErrorKind = ErrorKind.EFFECT,
        data: Optional[dict[str, Any]] = None,
        cause: Optional[BaseException] = None,
        event_name: str = EXECUTION_EVENT,
    ):
        self.message = message
        self.kind = kind
        self.data = dict(data or {})
        self.cause = cause
        self.event_name = event_name
        super().__init__(message)
        if cause is not None:
            self.__cause__ = cause

    def __str__(self) -> str:
        if self.cause is None:
            return self.message
        return f"{self.message}: {self.cause}"

    def payload(self) -> dict[str, Any]:
        """Serialize the error for API payloads."""
        item: dict[str, Any] = {
            "event": self.event_name,
            "kind": self.kind.value,
            "message": self.message,
            "data": {key: _plain(value) for key, value in self.data.items()},
        }
        if self.cause is not None:
            item["cause"] = str(self.cause) or self.cause.__class__.__name__
        return item


def _plain(value: Any) -> Any:
    if value is None or isinstance(value, (str, int, float, bool)):
        return value
    if isinstance(value, (list, tuple)):
        return [_plain(item) for item in value]
    return str(value)


def missing_datamodel(namespace: str, element: str) -> ActionError:
    return ActionError(
        f"No data model available for {namespace}",
        kind=ErrorKind.MISSING_DATAMODEL,
        data={"element": element},
    )


def missing_parameter(action: str, parameter: str, **data: Any) -> ActionError:
    return ActionError(
        f"{action} requires {parameter} attribute",
        kind=ErrorKind.MISSING_PARAMETER,
        data={"element": action.rsplit(":", 1)[-1], "parameter": parameter, **data},
    )


def conflicting_parameters(action: str, first: str, second: str, **data: Any) -> ActionError:
    return ActionError(
        f"{action} cannot have both {first} and {second} attributes",
        kind=ErrorKind.CONFLICT,
        data={"element": action.rsplit(":", 1)[-1], "attributes": [first, second], **data},
    )


def evaluation_failed(
    element: str, attribute: str, expression: str, cause: BaseException, **data: Any
) -> ActionError:
    return ActionError(
        f"Failed to evaluate {attribute}",
        kind=ErrorKind.EVALUATION,
        data={"element": element, attribute: expression, **data},
        cause=cause,
    )


def effect_failed(message: str, element: str, cause: BaseException, **data: Any) -> ActionError:
    return ActionError(
        message,
        kind=ErrorKind.EFFECT,
        data={"element": element, **data},
        cause=cause,
    )
