"""Line-oriented console input (stdin:read)."""

from __future__ import annotations

from typing import Any, Callable, Optional, TextIO
import logging
import sys
import threading

from agentns.namespaces.api import HandleResult, Interpreter, NamespaceLoader, dispatch
from agentns.namespaces.stdin import read as read_action

NAMESPACE_URI = "github.com/agentflare-ai/agentml/stdin"

logger = logging.getLogger("agentns.namespaces.stdin")


class StdinNamespace:
    """Owns one input cursor for the lifetime of the module.

    The reader is opened on the first read and reused afterwards; opening a
    new one per read would drop whatever the previous reader buffered past
    the consumed line.
    """

    def __init__(
        self,
        interpreter: Interpreter,
        open_input: Callable[[], TextIO],
        prompt_stream: Optional[TextIO] = None,
    ) -> None:
        self.interpreter = interpreter
        self._open_input = open_input
        self._prompt_stream = prompt_stream
        self._reader: Optional[TextIO] = None
        self._lock = threading.Lock()
        self._unloaded = False
        self._routes = {
            "read": lambda element: read_action.execute(self, element),
        }

    @property
    def uri(self) -> str:
        return NAMESPACE_URI

    def handle(self, element) -> HandleResult:
        if self._unloaded:
            raise RuntimeError("stdin namespace used after unload")
        return dispatch("stdin", element, self._routes)

    def unload(self) -> None:
        self._unloaded = True
        self._reader = None

    def write_prompt(self, prompt: str) -> None:
        stream = self._prompt_stream if self._prompt_stream is not None else sys.stderr
        stream.write(prompt)
        stream.flush()

    def read_line(self) -> Optional[str]:
        """Next line without its line ending, or None at end of input."""
        with self._lock:
            if self._reader is None:
                self._reader = self._open_input()
            line = self._reader.readline()
        if line == "":
            return None
        if line.endswith("\n"):
            line = line[:-1]
        if line.endswith("\r"):
            line = line[:-1]
        return line


def loader(
    input_stream: Optional[TextIO] = None,
    prompt_stream: Optional[TextIO] = None,
) -> NamespaceLoader:
    """Loader for the stdin namespace.

    ``input_stream`` defaults to ``sys.stdin`` and ``prompt_stream`` to
    ``sys.stderr``, both looked up when first used.
    """

    def _open_input() -> TextIO:
        return input_stream if input_stream is not None else sys.stdin

    def _load(interpreter: Interpreter, document: Any) -> StdinNamespace:
        return StdinNamespace(interpreter, _open_input, prompt_stream)

    return _load
