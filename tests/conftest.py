import pytest

from lxml_pathselect import DefaultQueryOptions, Document


SAMPLE_XML = """\
<?xml version="1.0" encoding="UTF-8"?>
<A>
    <B id="one">
        <C code="1234">A-B(one)-C.1234</C>
        <C code="5678"><![CDATA[A-B(one)-C.5678]]></C>
        <C code="9ABC">A-B(one)-C.9ABC</C>
        <D code="9ABC" id="d1"/>
    </B>
    <B id="two">
        <D id="d2"/>
    </B>
    <B id="three" org="{extern}">
        <C code="1234">A-B(three)-C.1234</C>
        <C code="9ABC">A-B(three)-C.9ABC</C>
        <D id="d3" description="A-B(three)-D.9ABC"/>
    </B>
    <B id="four">one {B4} two {B4}</B>
</A>
"""


@pytest.fixture(autouse=True)
def _reset_query_options():
    DefaultQueryOptions.reset_defaults()
    yield
    DefaultQueryOptions.reset_defaults()


@pytest.fixture
def sample_document():
    return Document(SAMPLE_XML)


@pytest.fixture
def nested_document():
    return Document(
        "<root>"
        '<section n="1">'
        '<p n="1.1"><hi n="1.1.1"/></p>'
        '<section n="1.2"><p n="1.2.1"/></section>'
        '<p n="1.3"/>'
        "</section>"
        '<p n="2"/>'
        "</root>"
    )
