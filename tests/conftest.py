"""Shared pytest fixtures for agentns tests."""

from __future__ import annotations

from pathlib import Path
import sys
from typing import Any, Callable, Optional

import pytest

REPO_ROOT = Path(__file__).resolve().parents[1]
if str(REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(REPO_ROOT))

from agentns.datamodel import MemoryDataModel  # noqa: E402
from agentns.document import Element, parse_document  # noqa: E402
from agentns.stores import MemoryStore  # noqa: E402


def pytest_configure(config: pytest.Config) -> None:
    config.addinivalue_line("markers", "unit: fast isolated tests")


class FakeInterpreter:
    """Minimal interpreter: records logs and executed children."""

    def __init__(self, datamodel: Optional[Any] = None, on_execute: Optional[Callable[[Any], None]] = None):
        self._datamodel = datamodel
        self._on_execute = on_execute
        self.logs: list[tuple[str, str]] = []
        self.executed: list[str] = []

    def log(self, label: str, message: str) -> None:
        self.logs.append((label, message))

    def datamodel(self):
        return self._datamodel

    def execute_element(self, element) -> None:
        self.executed.append(element.tag_name)
        if self._on_execute is not None:
            self._on_execute(element)

    def messages(self, label: str) -> list[str]:
        return [message for entry_label, message in self.logs if entry_label == label]


@pytest.fixture
def datamodel() -> MemoryDataModel:
    return MemoryDataModel()


@pytest.fixture
def interpreter(datamodel: MemoryDataModel) -> FakeInterpreter:
    return FakeInterpreter(datamodel)


@pytest.fixture
def store() -> MemoryStore:
    return MemoryStore()


@pytest.fixture
def element() -> Callable[[str], Element]:
    def _element(xml: str) -> Element:
        return parse_document(xml).root

    return _element


@pytest.fixture
def make_interpreter() -> type[FakeInterpreter]:
    return FakeInterpreter
