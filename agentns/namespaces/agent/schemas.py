"""Discovery of ``event:schema`` annotations on transitions.

Advisory only: schemas are logged and recorded, never parsed or enforced,
and a missing or malformed schema changes nothing about execution.
"""

from __future__ import annotations

from typing import Optional

from agentns.namespaces.api import Element, Interpreter

SCHEMA_ATTRIBUTE = "event:schema"


def log_transition(interpreter: Interpreter, element: Element) -> None:
    schema = element.get_attribute(SCHEMA_ATTRIBUTE)
    if schema:
        interpreter.log("agent", f"Transition event schema: {schema}")


def scan(interpreter: Interpreter, element: Optional[Element], found: dict[str, str]) -> dict[str, str]:
    """Walk ``element`` and its descendants, recording event -> schema in ``found``."""
    if element is None:
        return found

    if element.local_name.lower() == "transition":
        schema = element.get_attribute(SCHEMA_ATTRIBUTE)
        event = element.get_attribute("event")
        if schema and event:
            interpreter.log("agent", f"Event schema for '{event}': {schema}")
            found[event] = schema

    for child in element.children():
        scan(interpreter, child, found)
    return found
