import pytest

from lxml_pathselect import (
    AttributeConstraint,
    LocationKind,
    LocationStep,
    MalformedPath,
    parse_location_step,
)


@pytest.mark.parametrize(
    ("expression", "offset", "expected"),
    (
        ("B", 1, LocationStep("B")),
        ("", 1, LocationStep("")),
        ("*", 1, LocationStep("", LocationKind.AnyChild)),
        (".", 1, LocationStep("", LocationKind.Self)),
        ("..", 1, LocationStep("", LocationKind.Parent)),
        ("/A", 0, LocationStep("A", LocationKind.Root)),
        ("/*", 0, LocationStep("", LocationKind.Root)),
        ("/", 0, LocationStep("", LocationKind.Root)),
        ("/C", 2, LocationStep("C", LocationKind.AllDescendants)),
        ("//C", 0, LocationStep("C", LocationKind.AllDescendants)),
        ("/", 3, LocationStep("", LocationKind.AllDescendants)),
        ("/*", 3, LocationStep("", LocationKind.AllDescendants)),
        ("my.element", 1, LocationStep("my.element")),
        ("tei:div", 1, LocationStep("tei:div")),
        (
            "B[@id='one']",
            1,
            LocationStep("B", attribute_constraints=[AttributeConstraint("id", "one")]),
        ),
        (
            "B[@id=one]",
            1,
            LocationStep("B", attribute_constraints=[AttributeConstraint("id", "one")]),
        ),
        (
            'B[@id="one"]',
            1,
            LocationStep("B", attribute_constraints=[AttributeConstraint("id", "one")]),
        ),
        (
            "B[@org]",
            1,
            LocationStep("B", attribute_constraints=[AttributeConstraint("org")]),
        ),
        (
            "B[ @id = 'one' ][@org]",
            1,
            LocationStep(
                "B",
                attribute_constraints=[
                    AttributeConstraint("id", "one"),
                    AttributeConstraint("org"),
                ],
            ),
        ),
        (
            "[@code='9ABC']",
            1,
            LocationStep(
                "", attribute_constraints=[AttributeConstraint("code", "9ABC")]
            ),
        ),
        (
            ".[@id='one']",
            1,
            LocationStep(
                "", LocationKind.Self, [AttributeConstraint("id", "one")]
            ),
        ),
        (
            "a[@href='https://x.org/?a=[b']",
            1,
            LocationStep(
                "a",
                attribute_constraints=[
                    AttributeConstraint("href", "https://x.org/?a=[b")
                ],
            ),
        ),
        (
            "a[@title=\"it's\"]",
            1,
            LocationStep(
                "a", attribute_constraints=[AttributeConstraint("title", "it's")]
            ),
        ),
        ("B[]", 1, LocationStep("B")),
    ),
)
def test_parse_location_step(expression, offset, expected):
    assert parse_location_step(expression, offset) == expected


@pytest.mark.parametrize(
    "expression",
    ("C[1]", "C[last()]", "C[ position() < 3 ]", "C[1][@code]", "/C[2]"),
)
def test_unsupported_predicates(expression):
    assert parse_location_step(expression, 1).kind is LocationKind.Unsupported


@pytest.mark.parametrize(
    ("expression", "offset", "position"),
    (
        ("B]", 1, 2),
        ("B[[", 1, 3),
        ("B@id", 1, 2),
        ("B[@id=1=2]", 1, 8),
        ("B[=1]", 1, 3),
        ("B[@=1]", 1, 4),
        ("B[@]", 1, 4),
        ("B'", 1, 2),
        ("...", 1, 3),
        (".B", 1, 2),
        ("B*", 1, 2),
        ("**", 1, 2),
        ("*B", 1, 2),
        ("//B", 4, 5),
        ("B[@id]C", 5, 11),
        ("B[@id", 1, 6),
        ("B[@id='one'", 1, 12),
        ("C[1][2[3]]", 1, 7),
        ("/.", 0, 1),
    ),
)
def test_malformed_location_steps(expression, offset, position):
    with pytest.raises(MalformedPath) as exception_info:
        parse_location_step(expression, offset)

    exception = exception_info.value
    assert exception.position == position
    assert exception.expression == expression
    assert f"character {position}" in str(exception)


def test_malformed_path_is_a_value_error():
    with pytest.raises(ValueError):
        parse_location_step("B]")


@pytest.mark.parametrize(
    ("expression", "offset"),
    (
        ("B", 1),
        ("*", 1),
        (".", 1),
        ("..", 1),
        ("/A", 0),
        ("/C", 2),
        ("B[@id='one'][@org]", 1),
        ('a[@title="it\'s"]', 1),
    ),
)
def test_string_representation(expression, offset):
    assert str(parse_location_step(expression, offset)) == expression


def test_matches_name():
    assert parse_location_step("*").matches_name("anything")
    assert parse_location_step("B").matches_name("B")
    assert not parse_location_step("B").matches_name("C")
    assert parse_location_step("B").name_filter == "B"
    assert parse_location_step("*").name_filter is None
