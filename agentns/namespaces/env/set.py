"""env:set - write one environment variable.

    <env:set name="MY_VAR" value="hello"/>
    <env:set name="PORT" expr="server_port"/>
"""

from __future__ import annotations

import logging

from agentns.errors import effect_failed, missing_datamodel
from agentns.namespaces.api import Element, Interpreter
from agentns.namespaces.attributes import AttributeSpec, resolve_attribute
from agentns.stores import KeyValueStore

ACTION = "env:set"

NAME = AttributeSpec("name", "nameexpr", required=True)
VALUE = AttributeSpec("value", "expr", required=True, exclusive=True, strip=False)

logger = logging.getLogger("agentns.namespaces.env.set")


def execute(interpreter: Interpreter, store: KeyValueStore, element: Element) -> None:
    dm = interpreter.datamodel()
    if dm is None:
        raise missing_datamodel("env", "set")

    name = resolve_attribute(element, NAME, dm, ACTION)
    value = resolve_attribute(element, VALUE, dm, ACTION, name=name)

    try:
        store.set(name, value)
    except Exception as exc:  # noqa: BLE001
        raise effect_failed(
            "Failed to set environment variable", "set", exc, name=name, value=value
        ) from exc
    logger.debug("env:set %s", name)
