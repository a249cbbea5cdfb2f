"""
Tests for native type conversion.
Run with: pytest
"""
import pytest

from dbaccess.converters import CqlTypeConverter, SqlTypeConverter, get_type_converter
from dbaccess.core.exceptions import UnsupportedEngineError
from dbaccess.models.schema import DataType

MARSHAL = "org.apache.cassandra.db.marshal."


@pytest.mark.parametrize(
    "native_type, expected",
    [
        ("VARCHAR(255)", DataType.TEXT),
        ("character varying", DataType.TEXT),
        ("int4", DataType.INTEGER),
        ("BIGINT", DataType.INTEGER),
        ("int unsigned", DataType.INTEGER),
        ("NUMERIC(10, 2)", DataType.DECIMAL),
        ("double precision", DataType.FLOAT),
        ("boolean", DataType.BOOLEAN),
        ("date", DataType.DATE),
        ("timestamp(6) with time zone", DataType.DATETIME),
        ("bytea", DataType.BINARY),
        ("uuid", DataType.GUID),
        ("jsonb", DataType.JSON),
        ("UNSIGNED BIG INT", DataType.INTEGER),
        ("NATIVE CHARACTER(70)", DataType.TEXT),
        ("interval", DataType.UNKNOWN),
        ("integer[]", DataType.UNKNOWN),
        ("ARRAY", DataType.UNKNOWN),
        ("USER-DEFINED", DataType.UNKNOWN),
    ],
)
def test_sql_converter_maps_relational_type_names(native_type, expected):
    """Relational type names resolve to the canonical type"""
    assert SqlTypeConverter().convert(native_type) == expected


@pytest.mark.parametrize(
    "native_type, expected",
    [
        (f"{MARSHAL}UTF8Type", DataType.TEXT),
        (f"{MARSHAL}Int32Type", DataType.INTEGER),
        (f"{MARSHAL}LongType", DataType.INTEGER),
        (f"{MARSHAL}DecimalType", DataType.DECIMAL),
        (f"{MARSHAL}BooleanType", DataType.BOOLEAN),
        (f"{MARSHAL}TimestampType", DataType.DATETIME),
        (f"{MARSHAL}TimeUUIDType", DataType.GUID),
        (f"{MARSHAL}ReversedType({MARSHAL}TimestampType)", DataType.DATETIME),
        ("Int32Type", DataType.INTEGER),
        ("text", DataType.TEXT),
        ("blob", DataType.BINARY),
        (f"{MARSHAL}ListType({MARSHAL}UTF8Type)", DataType.UNKNOWN),
    ],
)
def test_cql_converter_maps_validators_and_cql_names(native_type, expected):
    """Validator class strings and CQL names resolve to the canonical type"""
    assert CqlTypeConverter().convert(native_type) == expected


def test_validator_to_cql_rewrites_collections():
    """Collection validators are rewritten into CQL collection syntax"""
    converter = CqlTypeConverter()

    assert converter.validator_to_cql(f"{MARSHAL}ListType({MARSHAL}UTF8Type)") == "list<text>"
    assert (
        converter.validator_to_cql(
            f"{MARSHAL}MapType({MARSHAL}UTF8Type,{MARSHAL}ListType({MARSHAL}Int32Type))"
        )
        == "map<text, list<int>>"
    )
    assert converter.validator_to_cql("CompositeType(Foo)") == "CompositeType(Foo)"


@pytest.mark.parametrize("converter", [SqlTypeConverter(), CqlTypeConverter()])
@pytest.mark.parametrize(
    "garbage",
    [None, "", "   ", 42, "(((", ")))", "ReversedType(", "ReversedType()", "x" * 500, "ünïcödé"],
)
def test_converters_are_total(converter, garbage):
    """Any input yields a canonical type and never raises"""
    result = converter.convert(garbage)

    assert isinstance(result, DataType)
    assert result == DataType.UNKNOWN


@pytest.mark.parametrize("wrapper", ["ReversedType(", "FrozenType(", "ListType(", "SetType("])
def test_cql_converter_is_total_for_deep_nesting(wrapper):
    """Pathologically nested validators give UNKNOWN instead of overflowing the stack"""
    validator = f"{MARSHAL}{wrapper}" * 1200 + f"{MARSHAL}Int32Type" + ")" * 1200

    assert CqlTypeConverter().convert(validator) == DataType.UNKNOWN
    assert isinstance(CqlTypeConverter().validator_to_cql(validator), str)


def test_cql_converter_unwraps_ordinary_nesting():
    """Realistic nesting depths still resolve"""
    converter = CqlTypeConverter()
    reversed_frozen = f"{MARSHAL}ReversedType({MARSHAL}FrozenType({MARSHAL}UUIDType))"
    nested_list = f"{MARSHAL}ListType(" * 5 + f"{MARSHAL}Int32Type" + ")" * 5

    assert converter.convert(reversed_frozen) == DataType.GUID
    assert converter.validator_to_cql(nested_list) == "list<" * 5 + "int" + ">" * 5


def test_get_type_converter_by_engine():
    """Converters are selected by engine name"""
    assert isinstance(get_type_converter("postgres"), SqlTypeConverter)
    assert isinstance(get_type_converter("SQLite"), SqlTypeConverter)
    assert isinstance(get_type_converter("cassandra"), CqlTypeConverter)

    with pytest.raises(UnsupportedEngineError):
        get_type_converter("oracle")
