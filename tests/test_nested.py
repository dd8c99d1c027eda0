"""Tests for nested message references between definitions."""

import pytest
from ros_msgdef import (
    ArrayField,
    DefinitionTable,
    DuplicateDefinitionError,
    PrimitiveType,
    ScalarField,
    UnresolvedTypeError,
    parse_definition_body,
    parse_message_definition,
    resolve_sub_definitions,
)

SEPARATOR = "=" * 80 + "\n"

CHAR = ScalarField("char", PrimitiveType.CHAR)

# geometry_msgs/PoseStamped as written into a bag connection record
POSE_STAMPED = (
    "# A Pose with reference coordinate frame and timestamp\n"
    "Header header\n"
    "Pose pose\n"
    + SEPARATOR
    + "MSG: std_msgs/Header\n"
    "# Standard metadata for higher-level stamped data types.\n"
    "uint32 seq\n"
    "time stamp\n"
    "string frame_id\n"
    + SEPARATOR
    + "MSG: geometry_msgs/Pose\n"
    "Point position\n"
    "Quaternion orientation\n"
    + SEPARATOR
    + "MSG: geometry_msgs/Point\n"
    "float64 x\n"
    "float64 y\n"
    "float64 z\n"
    + SEPARATOR
    + "MSG: geometry_msgs/Quaternion\n"
    "float64 x\n"
    "float64 y\n"
    "float64 z\n"
    "float64 w\n"
).encode()


def test_dotted_name_composition():
    """Test that a composite reference splices in prefixed fields."""
    blob = ("Header header\n" + SEPARATOR + "MSG: std_msgs/Header\ntime stamp\n").encode()

    fields = parse_message_definition(blob)

    assert fields == [ScalarField("header.stamp", PrimitiveType.TIME)]
    assert "header" not in [field.name for field in fields]


def test_deeply_nested():
    """Test names composed across several nesting levels."""
    fields = parse_message_definition(POSE_STAMPED)

    assert [field.name for field in fields] == [
        "header.seq",
        "header.stamp",
        "header.frame_id",
        "pose.position.x",
        "pose.position.y",
        "pose.position.z",
        "pose.orientation.x",
        "pose.orientation.y",
        "pose.orientation.z",
        "pose.orientation.w",
    ]
    assert fields[2] == ArrayField("header.frame_id", (CHAR,), PrimitiveType.CHAR)
    assert all(field.data_type is PrimitiveType.FLOAT64 for field in fields[3:])


def test_qualified_and_short_names_resolve_equally():
    """Test that pkg/Name and Name resolve to the same fields."""
    body = "MSG: geometry_msgs/Point\nfloat64 x\nstring label\n"
    qualified = parse_message_definition(("geometry_msgs/Point p\n" + SEPARATOR + body).encode())
    short = parse_message_definition(("Point p\n" + SEPARATOR + body).encode())

    assert qualified == short
    assert [field.name for field in short] == ["p.x", "p.label"]


def test_table_has_both_names():
    """Test that the definition table stores qualified and short names."""
    table = resolve_sub_definitions(POSE_STAMPED)

    for name in ("std_msgs/Header", "Header", "geometry_msgs/Pose", "Pose", "Point", "Quaternion"):
        assert name in table
    assert table.get("geometry_msgs/Point") == table.get("Point")
    assert len(table) == 8


def test_unqualified_definition_name():
    """Test a sub-definition declared without a package."""
    blob = ("Inner inner\n" + SEPARATOR + "MSG: Inner\nint8 value\n").encode()
    table = resolve_sub_definitions(blob)

    assert list(table) == ["Inner"]
    assert parse_message_definition(blob) == [ScalarField("inner.value", PrimitiveType.INT8)]


def test_dynamic_array_of_composite():
    """Test an unbounded array of a nested message."""
    blob = (
        "geometry_msgs/Point[] points\n"
        + SEPARATOR
        + "MSG: geometry_msgs/Point\nfloat64 x\nfloat64 y\n"
    ).encode()

    (field,) = parse_message_definition(blob)

    assert field == ArrayField(
        "points",
        (
            ScalarField("points.x", PrimitiveType.FLOAT64),
            ScalarField("points.y", PrimitiveType.FLOAT64),
        ),
        PrimitiveType.COMPLEX,
    )
    assert field.data_type is PrimitiveType.ARRAY


def test_fixed_array_of_composite():
    """Test a fixed-length array of a nested message keeps its length."""
    blob = (
        "Point[3] corners\nint32 count\n"
        + SEPARATOR
        + "MSG: geometry_msgs/Point\nfloat64 x\nfloat64 y\n"
    ).encode()

    corners, count = parse_message_definition(blob)

    assert isinstance(corners, ArrayField)
    assert corners.fixed_length == 3
    assert corners.element_type is PrimitiveType.COMPLEX
    assert [element.name for element in corners.elements] == ["corners.x", "corners.y"]
    assert count == ScalarField("count", PrimitiveType.INT32)


def test_nested_array_kinds_are_preserved():
    """Test that arrays inside a referenced message keep their kind."""
    blob = (
        "Scan scan\n"
        + SEPARATOR
        + "MSG: sensor_msgs/Scan\nfloat32[] ranges\nuint8[4] flags\nstring[] tags\n"
    ).encode()

    ranges, flags, tags = parse_message_definition(blob)

    assert ranges == ArrayField(
        "scan.ranges", (ScalarField("ranges_item", PrimitiveType.FLOAT32),), PrimitiveType.FLOAT32
    )
    assert flags.name == "scan.flags"
    assert flags.fixed_length == 4
    assert tags.name == "scan.tags"
    assert tags.element_type is PrimitiveType.STRING


def test_array_of_composite_containing_composite():
    """Test an array whose element message splices in another message."""
    blob = (
        "Marker[] markers\n"
        + SEPARATOR
        + "MSG: viz_msgs/Marker\nHeader header\nint32 id\n"
        + SEPARATOR
        + "MSG: std_msgs/Header\nuint32 seq\n"
    ).encode()

    (markers,) = parse_message_definition(blob)

    assert isinstance(markers, ArrayField)
    assert [element.name for element in markers.elements] == [
        "markers.header.seq",
        "markers.id",
    ]


def test_reference_to_preceding_definition_fails():
    """Test that a sub-definition cannot reference a block declared before it.

    Sub-definitions are resolved last-declared first, matching the order in
    which dependencies are written after their dependents.
    """
    blob = (
        "int32 data\n"
        + SEPARATOR
        + "MSG: pkg/B\nint32 b\n"
        + SEPARATOR
        + "MSG: pkg/A\nB b\n"
    ).encode()

    with pytest.raises(UnresolvedTypeError) as exc_info:
        parse_message_definition(blob)
    assert exc_info.value.type_name == "B"


def test_duplicate_definition():
    """Test that declaring the same definition twice is rejected."""
    blob = (
        "int32 data\n"
        + SEPARATOR
        + "MSG: pkg/A\nint32 a\n"
        + SEPARATOR
        + "MSG: pkg/A\nint32 a\n"
    ).encode()

    with pytest.raises(DuplicateDefinitionError):
        parse_message_definition(blob)


def test_short_name_collision_keeps_first_alias():
    """Test that two packages sharing a message name keep both qualified names."""
    table = DefinitionTable()
    table.add("a_msgs/Status", [ScalarField("level", PrimitiveType.UINT8)])
    table.add("b_msgs/Status", [ScalarField("code", PrimitiveType.INT32)])

    assert table.get("a_msgs/Status") == (ScalarField("level", PrimitiveType.UINT8),)
    assert table.get("b_msgs/Status") == (ScalarField("code", PrimitiveType.INT32),)
    assert table.get("Status") == table.get("a_msgs/Status")


def test_parse_definition_body_with_table():
    """Test parsing a single body against a prepared table."""
    table = DefinitionTable()
    table.add("geometry_msgs/Vector3", [ScalarField(axis, PrimitiveType.FLOAT64) for axis in "xyz"])

    fields = parse_definition_body("Vector3 linear\nVector3 angular\n", table)

    assert [field.name for field in fields] == [
        "linear.x",
        "linear.y",
        "linear.z",
        "angular.x",
        "angular.y",
        "angular.z",
    ]


def test_table_is_not_modified_by_references():
    """Test that renaming copies leaves table entries untouched."""
    table = DefinitionTable()
    table.add("pkg/Inner", [ScalarField("value", PrimitiveType.INT8)])

    parse_definition_body("Inner first\nInner second\n", table)

    assert table.get("Inner") == (ScalarField("value", PrimitiveType.INT8),)


def test_unqualified_declaration_replaces_alias():
    """Test that an explicit short-name block wins over a qualified block's alias."""
    blob = (
        "Header h\n"
        + SEPARATOR
        + "MSG: Header\nint32 explicit\n"
        + SEPARATOR
        + "MSG: std_msgs/Header\nuint32 seq\n"
    ).encode()

    assert parse_message_definition(blob) == [ScalarField("h.explicit", PrimitiveType.INT32)]
    table = resolve_sub_definitions(blob)
    assert table.get("std_msgs/Header") == (ScalarField("seq", PrimitiveType.UINT32),)
    assert table.get("Header") == (ScalarField("explicit", PrimitiveType.INT32),)


def test_explicit_short_name_declared_twice():
    """Test that replacing an alias happens only once."""
    table = DefinitionTable()
    table.add("std_msgs/Header", [ScalarField("seq", PrimitiveType.UINT32)])
    table.add("Header", [ScalarField("a", PrimitiveType.INT32)])

    with pytest.raises(DuplicateDefinitionError):
        table.add("Header", [ScalarField("b", PrimitiveType.INT32)])
