from __future__ import annotations

import pytest

from agentns.document import DocumentError, load_document, parse_document


@pytest.mark.unit
def test_prefixes_resolve_against_declarations_in_scope():
    doc = parse_document(
        '<agent xmlns="urn:agent" xmlns:env="urn:env">'
        '<state id="s"><env:get name="A" location="a"/></state>'
        "<stdin:read location='b'/>"
        "</agent>"
    )
    root = doc.root
    state, read = root.children()
    get = state.children()[0]

    assert root.namespace_uri == "urn:agent"
    assert state.namespace_uri == "urn:agent"
    assert (get.prefix, get.local_name, get.tag_name) == ("env", "get", "env:get")
    assert get.namespace_uri == "urn:env"
    assert read.namespace_uri == ""
    assert read.local_name == "read"
    assert get.lookup_namespace("") == "urn:agent"
    assert root.lookup_namespace("env") == "urn:env"
    assert read.lookup_namespace("stdin") == ""
    assert get.parent is state


@pytest.mark.unit
def test_undeclared_prefixes_are_accepted_on_attributes():
    root = parse_document('<agent use:memory="urn:memory" event:schema="{}"/>').root
    assert root.get_attribute("use:memory") == "urn:memory"
    assert root.get_attribute("event:schema") == "{}"
    assert root.attributes() == [("use:memory", "urn:memory"), ("event:schema", "{}")]


@pytest.mark.unit
def test_missing_attribute_reads_as_empty():
    root = parse_document('<x present=""/>').root
    assert root.get_attribute("absent") == ""
    assert root.get_attribute("present") == ""
    assert root.has_attribute("present")
    assert not root.has_attribute("absent")


@pytest.mark.unit
def test_iter_walks_depth_first():
    root = parse_document("<a><b><c/></b><d/></a>").root
    assert [el.tag_name for el in root.iter()] == ["a", "b", "c", "d"]


@pytest.mark.unit
def test_text_is_kept():
    root = parse_document("<a>hello <b/>world</a>").root
    assert root.text == "hello world"


@pytest.mark.unit
def test_malformed_document_raises(tmp_path):
    with pytest.raises(DocumentError):
        parse_document("<a><b></a>")
    bad = tmp_path / "bad.xml"
    bad.write_text("<a>", encoding="utf-8")
    with pytest.raises(DocumentError) as excinfo:
        load_document(bad)
    assert str(bad) in str(excinfo.value)


@pytest.mark.unit
def test_load_document(tmp_path):
    path = tmp_path / "doc.xml"
    path.write_text('<?xml version="1.0"?>\n<agent datamodel="ecmascript"/>', encoding="utf-8")
    doc = load_document(path)
    assert doc.source == str(path)
    assert doc.root.get_attribute("datamodel") == "ecmascript"
