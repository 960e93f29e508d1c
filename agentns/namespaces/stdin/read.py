"""stdin:read - read one line of input into the data model.

    <stdin:read location="answer" prompt="Name? "/>
    <stdin:read dataid="answer" promptexpr="'Hello ' + user + ': '"/>

At end of input the location is set to null.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from agentns.errors import effect_failed, missing_datamodel, missing_parameter
from agentns.namespaces.api import Element
from agentns.namespaces.attributes import AttributeSpec, resolve_attribute

if TYPE_CHECKING:
    from agentns.namespaces.stdin import StdinNamespace

ACTION = "stdin:read"

PROMPT = AttributeSpec("prompt", "promptexpr", strip=False)


def execute(namespace: "StdinNamespace", element: Element) -> None:
    dm = namespace.interpreter.datamodel()
    if dm is None:
        raise missing_datamodel("stdin", "read")

    location = (element.get_attribute("location") or element.get_attribute("dataid")).strip()
    if not location:
        raise missing_parameter(ACTION, "location or dataid")

    prompt = resolve_attribute(element, PROMPT, dm, ACTION, location=location)
    if prompt:
        try:
            namespace.write_prompt(prompt)
        except (OSError, ValueError) as exc:
            raise effect_failed(
                "Failed to write prompt", "read", exc, location=location, prompt=prompt
            ) from exc

    try:
        line = namespace.read_line()
    except (OSError, ValueError) as exc:
        raise effect_failed("Failed to read from stdin", "read", exc, location=location) from exc

    try:
        dm.set_variable(location, line)
    except Exception as exc:  # noqa: BLE001
        raise effect_failed(
            "Failed to store input line", "read", exc, location=location
        ) from exc
