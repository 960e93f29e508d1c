"""agent:agent - document root replacing <scxml>.

    <agent xmlns="github.com/agentflare-ai/agentml/agent" datamodel="ecmascript"
           use:memory="github.com/agentflare-ai/agentml/memory">
      ...standard state chart content...
    </agent>

``use:<prefix>="uri"`` declares a namespace alias (the equivalent of
``xmlns:<prefix>``). Children run in document order through the
interpreter; the first failure stops the run and earlier effects stay.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from agentns.errors import ActionError, ErrorKind
from agentns.namespaces.agent import schemas
from agentns.namespaces.api import Element

if TYPE_CHECKING:
    from agentns.namespaces.agent import AgentNamespace

ALIAS_PREFIX = "use:"


def namespace_aliases(element: Element) -> list[tuple[str, str]]:
    """``use:`` declarations as (prefix, uri) pairs in document order."""
    aliases = []
    for name, value in element.attributes():
        if name.startswith(ALIAS_PREFIX):
            aliases.append((name[len(ALIAS_PREFIX):], value))
    return aliases


def execute(namespace: "AgentNamespace", element: Element) -> None:
    interpreter = namespace.interpreter
    datamodel = element.get_attribute("datamodel")
    aliases = namespace_aliases(element)

    if datamodel:
        interpreter.log("agent", f"Datamodel: {datamodel}")
    for prefix, uri in aliases:
        interpreter.log("agent", f"Namespace {prefix}: {uri}")
        namespace.aliases[prefix] = uri

    schemas.scan(interpreter, element, namespace.schemas)

    for child in element.children():
        try:
            interpreter.execute_element(child)
        except Exception as exc:  # noqa: BLE001
            raise ActionError(
                f"Failed to execute agent child element: {exc}",
                kind=ErrorKind.CHILD_FAILED,
                data={
                    "element": "agent",
                    "child": child.tag_name,
                    "datamodel": datamodel,
                },
                cause=exc,
            ) from exc
