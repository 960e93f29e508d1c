from __future__ import annotations

import pytest

from agentns.datamodel import DataModelError, MemoryDataModel
from agentns.value_model import stringify


@pytest.mark.unit
def test_literals():
    dm = MemoryDataModel()
    assert dm.evaluate_value("'single'") == "single"
    assert dm.evaluate_value('"double \\"quoted\\""') == 'double "quoted"'
    assert dm.evaluate_value("42") == 42
    assert dm.evaluate_value("2.5") == 2.5
    assert dm.evaluate_value("-3") == -3
    assert dm.evaluate_value("true") is True
    assert dm.evaluate_value("false") is False
    assert dm.evaluate_value("null") is None


@pytest.mark.unit
def test_paths_and_addition():
    dm = MemoryDataModel({"server": {"host": "localhost", "port": 8080}, "truthy": 1})
    assert dm.evaluate_value("server.host") == "localhost"
    assert dm.evaluate_value("server.port + 1") == 8081
    assert dm.evaluate_value("server.host + ':' + server.port") == "localhost:8080"
    assert dm.evaluate_value("(1 + 2) + 'x'") == "3x"
    assert dm.evaluate_value("truthy") == 1


@pytest.mark.unit
def test_keywords_do_not_swallow_identifiers():
    dm = MemoryDataModel({"trueish": "yes", "nullable": "no"})
    assert dm.evaluate_value("trueish") == "yes"
    assert dm.evaluate_value("nullable") == "no"


@pytest.mark.unit
@pytest.mark.parametrize("expression", ["", "1 +", "'open", "a..b", "undefined", "server.missing", "-'x'", "true + 1"])
def test_evaluation_errors(expression):
    dm = MemoryDataModel({"server": {"host": "h"}})
    with pytest.raises(DataModelError):
        dm.evaluate_value(expression)


@pytest.mark.unit
def test_set_and_get_nested_variables():
    dm = MemoryDataModel()
    dm.set_variable("a.b.c", 1)
    dm.set_variable("top", None)
    assert dm.get_variable("a.b.c") == 1
    assert dm.get_variable("a") == {"b": {"c": 1}}
    assert dm.has_variable("top")
    assert dm.get_variable("top") is None
    assert not dm.has_variable("a.b.d")

    snapshot = dm.snapshot()
    snapshot["a"]["b"]["c"] = 2
    assert dm.get_variable("a.b.c") == 1


@pytest.mark.unit
@pytest.mark.parametrize("location", ["", "1abc", "a..b", "a b", "a.b.c.d.top"])
def test_invalid_locations(location):
    dm = MemoryDataModel({"a": {"b": {"c": "leaf"}}})
    with pytest.raises(DataModelError):
        dm.set_variable(location, "x")


@pytest.mark.unit
def test_stringify_canonical_forms():
    assert stringify("text") == "text"
    assert stringify(True) == "true"
    assert stringify(False) == "false"
    assert stringify(8080) == "8080"
    assert stringify(8080.0) == "8080"
    assert stringify(0.25) == "0.25"
    assert stringify(None) == ""
    assert stringify({"a": [1, 2]}) == '{"a":[1,2]}'
