from io import BytesIO, StringIO

import pytest
from lxml import etree

from lxml_pathselect import (
    Document,
    DocumentParseFailed,
    InvalidOperation,
    NullOrigin,
    attribute_value,
    find_element,
    load_document,
    text,
)
from lxml_pathselect.loaders import configured_loaders

from tests.conftest import SAMPLE_XML


@pytest.mark.parametrize(
    "source",
    (
        "<root><child/></root>",
        b"<root><child/></root>",
        BytesIO(b"<root><child/></root>"),
        StringIO("<root><child/></root>"),
        etree.fromstring("<root><child/></root>"),
        etree.ElementTree(etree.fromstring("<root><child/></root>")),
    ),
)
def test_loaders(source):
    document = Document(source)
    assert str(document) == "<root><child/></root>"
    assert document.find_element("root/child") is not None


def test_path_loader(tmp_path):
    path = tmp_path / "sample.xml"
    path.write_text(SAMPLE_XML)

    document = Document(path)

    assert document.root.tag == "A"
    assert len(list(document.selection("A/B/C"))) == 5


def test_etree_sources_are_copied():
    root = etree.fromstring("<root/>")
    document = Document(root)
    assert document.root is not root
    assert root not in document


def test_blank_text_is_removed():
    document = Document("<root>\n  <a/>\n  <b> x </b>\n</root>")
    assert str(document) == "<root><a/><b> x </b></root>"


@pytest.mark.parametrize("source", ("<root>", b"<root></a>", 42))
def test_failed_loading(source):
    with pytest.raises(DocumentParseFailed) as excinfo:
        Document(source)
    assert excinfo.value.source is source
    assert list(excinfo.value.excuses) == configured_loaders
    assert "text_loader" in str(excinfo.value)


def test_failed_loading_from_missing_file(tmp_path):
    with pytest.raises(DocumentParseFailed):
        Document(tmp_path / "missing.xml")


def test_empty_document():
    document = Document()

    assert document.root is None
    assert str(document) == ""
    assert document.find_element("A") is None
    assert list(document.selection()) == []


def test_parse():
    document = Document()
    document.parse(SAMPLE_XML)
    assert document.root.tag == "A"

    document.parse(b"<root/>")
    assert str(document) == "<root/>"

    with pytest.raises(DocumentParseFailed):
        document.parse("<root><unclosed></root>")
    assert str(document) == "<root/>"


def test_load_document():
    document = load_document(SAMPLE_XML)
    assert len(list(document.selection("A/B"))) == 4

    with pytest.raises(DocumentParseFailed):
        load_document("<root>")


def test_contains(sample_document):
    c = find_element(sample_document, "A/B/C")
    assert c in sample_document
    assert sample_document.root in sample_document
    assert c not in Document(SAMPLE_XML)
    assert c not in Document()


def test_attribute_value(sample_document):
    b = find_element(sample_document, "A/B[@id='three']")

    assert attribute_value(b, "org") == "{extern}"
    assert attribute_value(b, "missing") == ""

    with pytest.raises(InvalidOperation):
        attribute_value(b, "missing", raise_if_missing=True)
    with pytest.raises(InvalidOperation):
        attribute_value(b, "")
    with pytest.raises(NullOrigin):
        attribute_value(None, "id")


def test_prefixed_attribute_value():
    root = Document('<root xmlns:x="http://x.org" xml:lang="en" x:n="1"/>').root

    assert attribute_value(root, "xml:lang") == "en"
    assert attribute_value(root, "x:n") == "1"
    assert attribute_value(root, "n") == ""
    assert attribute_value(root, "y:n") == ""


def test_text(sample_document):
    assert text(find_element(sample_document, "A/B/C")) == "A-B(one)-C.1234"
    assert text(find_element(sample_document, "A/B/C[@code='5678']")) == (
        "A-B(one)-C.5678"
    )
    assert text(find_element(sample_document, "A/B[@id='four']")) == (
        "one {B4} two {B4}"
    )
    assert text(find_element(sample_document, "A/B/D")) == ""

    with pytest.raises(NullOrigin):
        text(None)
