"""Resolution of action parameters from element attributes.

A parameter is either a literal attribute (``name``) or an expression
attribute evaluated against the data model (``nameexpr``). Attributes that
are present but empty count as absent: ``Element.get_attribute`` cannot
tell the two apart.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Optional, Union

from agentns.errors import conflicting_parameters, evaluation_failed, missing_parameter
from agentns.namespaces.api import DataModel, Element
from agentns.value_model import stringify


class _Absent:
    """Marker for an optional parameter that was not provided."""

    _instance: Optional["_Absent"] = None

    def __new__(cls) -> "_Absent":
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __bool__(self) -> bool:
        return False

    def __repr__(self) -> str:
        return "ABSENT"


ABSENT = _Absent()

Resolved = Union[str, _Absent]


@dataclass(frozen=True)
class AttributeSpec:
    """A logical parameter backed by a literal and an optional expression attribute.

    ``exclusive`` marks value-style pairs where providing both attributes is
    a conflict; for name-style pairs the literal wins. ``strip`` trims
    surrounding whitespace from the literal and the expression.
    """

    literal: str
    expression: Optional[str] = None
    required: bool = False
    exclusive: bool = False
    strip: bool = True

    @property
    def label(self) -> str:
        if self.expression:
            return f"{self.literal} or {self.expression}"
        return self.literal


def _read(element: Element, name: Optional[str], strip: bool) -> str:
    if not name:
        return ""
    value = element.get_attribute(name)
    return value.strip() if strip else value


def resolve_attribute(
    element: Element,
    param: AttributeSpec,
    datamodel: Optional[DataModel],
    action: str,
    **context: Any,
) -> Resolved:
    """Resolve ``param`` on ``element``.

    ``action`` names the acting element (``env:get``) in error messages;
    ``context`` is attached to error data.
    """
    element_name = action.rsplit(":", 1)[-1]
    literal = _read(element, param.literal, param.strip)
    expression = _read(element, param.expression, param.strip)

    if param.exclusive and literal and expression:
        raise conflicting_parameters(action, param.literal, param.expression or "", **context)

    if literal:
        return literal

    if expression and datamodel is not None:
        try:
            value = datamodel.evaluate_value(expression)
        except Exception as exc:  # noqa: BLE001
            raise evaluation_failed(
                element_name, param.expression or "", expression, exc, **context
            ) from exc
        text = stringify(value)
        if text or not param.required:
            return text

    if param.required:
        raise missing_parameter(action, param.label, **context)
    return ABSENT
