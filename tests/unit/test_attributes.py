from __future__ import annotations

import pytest

from agentns.datamodel import DataModelError, MemoryDataModel
from agentns.errors import ActionError, ErrorKind
from agentns.namespaces.attributes import ABSENT, AttributeSpec, resolve_attribute

NAME = AttributeSpec("name", "nameexpr", required=True)
VALUE = AttributeSpec("value", "expr", required=True, exclusive=True, strip=False)
DEFAULT = AttributeSpec("default", strip=False)


class ExplodingDataModel:
    def evaluate_value(self, expression):
        raise AssertionError(f"unexpected evaluation of {expression!r}")

    def set_variable(self, location, value):
        raise AssertionError("unexpected write")


@pytest.mark.unit
def test_literal_wins_and_is_stripped(element, datamodel):
    el = element('<get name="  HOME " nameexpr="other"/>')
    assert resolve_attribute(el, NAME, datamodel, "env:get") == "HOME"


@pytest.mark.unit
def test_expression_is_evaluated_and_stringified(element):
    dm = MemoryDataModel({"port": 8080, "flag": True, "ratio": 0.5, "key": "PATH"})
    assert resolve_attribute(element('<get nameexpr="key"/>'), NAME, dm, "env:get") == "PATH"
    assert resolve_attribute(element('<get nameexpr="port"/>'), NAME, dm, "env:get") == "8080"
    assert resolve_attribute(element('<get nameexpr="flag"/>'), NAME, dm, "env:get") == "true"
    assert resolve_attribute(element('<get nameexpr="ratio"/>'), NAME, dm, "env:get") == "0.5"
    assert resolve_attribute(element('<get nameexpr="\'A_\' + port"/>'), NAME, dm, "env:get") == "A_8080"


@pytest.mark.unit
def test_exclusive_pair_conflict_is_reported_before_evaluation(element):
    el = element('<set name="X" value="x" expr="y"/>')
    with pytest.raises(ActionError) as excinfo:
        resolve_attribute(el, VALUE, ExplodingDataModel(), "env:set", name="X")
    err = excinfo.value
    assert err.kind is ErrorKind.CONFLICT
    assert err.event_name == "error.execution"
    assert err.data["name"] == "X"
    assert "both value and expr" in err.message


@pytest.mark.unit
def test_missing_required_parameter_names_it(element, datamodel):
    with pytest.raises(ActionError) as excinfo:
        resolve_attribute(element("<get/>"), NAME, datamodel, "env:get")
    assert excinfo.value.kind is ErrorKind.MISSING_PARAMETER
    assert excinfo.value.message == "env:get requires name or nameexpr attribute"
    assert excinfo.value.data["parameter"] == "name or nameexpr"


@pytest.mark.unit
def test_empty_attribute_counts_as_absent(element, datamodel):
    with pytest.raises(ActionError):
        resolve_attribute(element('<get name="   " nameexpr=""/>'), NAME, datamodel, "env:get")
    assert resolve_attribute(element('<get default=""/>'), DEFAULT, datamodel, "env:get") is ABSENT


@pytest.mark.unit
def test_optional_absent_is_distinct_from_empty(element, datamodel):
    resolved = resolve_attribute(element("<get/>"), DEFAULT, datamodel, "env:get")
    assert resolved is ABSENT
    assert resolved != ""
    assert not resolved
    assert repr(resolved) == "ABSENT"


@pytest.mark.unit
def test_optional_expression_may_resolve_empty(element):
    dm = MemoryDataModel({"blank": ""})
    prompt = AttributeSpec("prompt", "promptexpr", strip=False)
    assert resolve_attribute(element('<read promptexpr="blank"/>'), prompt, dm, "stdin:read") == ""


@pytest.mark.unit
def test_evaluation_failure_keeps_cause(element, datamodel):
    with pytest.raises(ActionError) as excinfo:
        resolve_attribute(element('<get nameexpr="missing.var"/>'), NAME, datamodel, "env:get")
    err = excinfo.value
    assert err.kind is ErrorKind.EVALUATION
    assert isinstance(err.cause, DataModelError)
    assert err.__cause__ is err.cause
    assert err.data["nameexpr"] == "missing.var"
    assert err.payload()["cause"]


@pytest.mark.unit
def test_null_expression_for_required_parameter_is_missing(element):
    dm = MemoryDataModel({"nothing": None})
    with pytest.raises(ActionError) as excinfo:
        resolve_attribute(element('<get nameexpr="nothing"/>'), NAME, dm, "env:get")
    assert excinfo.value.kind is ErrorKind.MISSING_PARAMETER
