"""env:get - read one environment variable into the data model.

    <env:get name="HOME" location="home_dir"/>
    <env:get nameexpr="'PO' + 'RT'" location="port" default="8080"/>
"""

from __future__ import annotations

import logging

from agentns.errors import effect_failed, missing_datamodel, missing_parameter
from agentns.namespaces.api import Element, Interpreter
from agentns.namespaces.attributes import ABSENT, AttributeSpec, resolve_attribute
from agentns.stores import KeyValueStore

ACTION = "env:get"

NAME = AttributeSpec("name", "nameexpr", required=True)
DEFAULT = AttributeSpec("default", strip=False)

logger = logging.getLogger("agentns.namespaces.env.get")


def execute(interpreter: Interpreter, store: KeyValueStore, element: Element) -> None:
    dm = interpreter.datamodel()
    if dm is None:
        raise missing_datamodel("env", "get")

    name = resolve_attribute(element, NAME, dm, ACTION)

    location = element.get_attribute("location").strip()
    if not location:
        raise missing_parameter(ACTION, "location", name=name)

    default = resolve_attribute(element, DEFAULT, dm, ACTION, name=name)

    try:
        value = store.get(name)
    except Exception as exc:  # noqa: BLE001
        raise effect_failed(
            "Failed to read environment variable", "get", exc, name=name
        ) from exc

    exists = value is not None
    if not exists:
        if default is not ABSENT:
            value = default
            interpreter.log("env", f"{name} is not set; using default for {location}")
        else:
            value = ""
    logger.debug("env:get %s -> %s (exists=%s)", name, location, exists)

    try:
        dm.set_variable(location, value)
    except Exception as exc:  # noqa: BLE001
        raise effect_failed(
            "Failed to store environment variable", "get", exc, name=name, location=location
        ) from exc
