"""Engine-specific type name conversion strategies.

Every converter is total: any input, including None or garbage, yields a
`DataType`. Unrecognized names map to `DataType.UNKNOWN`.
"""

import re
from abc import ABC, abstractmethod
from typing import Any, Dict

from dbaccess.core.exceptions import UnsupportedEngineError
from dbaccess.models.schema import DataType

# "VARCHAR(255)", "numeric(10, 2)", "timestamp(6) with time zone"
_TYPE_ARGUMENTS = re.compile(r"\(.*?\)")
_WHITESPACE = re.compile(r"\s+")


class TypeConverter(ABC):
    """Abstract base class for native type conversion."""

    @abstractmethod
    def convert(self, native_type: Any) -> DataType:
        """Convert a native type name to the canonical data type."""
        pass


class SqlTypeConverter(TypeConverter):
    """Type converter for relational engines (PostgreSQL, SQLite, MySQL-style names)."""

    EXACT_TYPES: Dict[str, DataType] = {
        # Text
        "text": DataType.TEXT,
        "varchar": DataType.TEXT,
        "character varying": DataType.TEXT,
        "char": DataType.TEXT,
        "character": DataType.TEXT,
        "nchar": DataType.TEXT,
        "nvarchar": DataType.TEXT,
        "bpchar": DataType.TEXT,
        "name": DataType.TEXT,
        "citext": DataType.TEXT,
        "clob": DataType.TEXT,
        "tinytext": DataType.TEXT,
        "mediumtext": DataType.TEXT,
        "longtext": DataType.TEXT,
        "enum": DataType.TEXT,
        # Integer
        "int": DataType.INTEGER,
        "integer": DataType.INTEGER,
        "int2": DataType.INTEGER,
        "int4": DataType.INTEGER,
        "int8": DataType.INTEGER,
        "smallint": DataType.INTEGER,
        "tinyint": DataType.INTEGER,
        "mediumint": DataType.INTEGER,
        "bigint": DataType.INTEGER,
        "serial": DataType.INTEGER,
        "bigserial": DataType.INTEGER,
        "smallserial": DataType.INTEGER,
        # Decimal
        "numeric": DataType.DECIMAL,
        "decimal": DataType.DECIMAL,
        "money": DataType.DECIMAL,
        # Float
        "real": DataType.FLOAT,
        "float": DataType.FLOAT,
        "float4": DataType.FLOAT,
        "float8": DataType.FLOAT,
        "double": DataType.FLOAT,
        "double precision": DataType.FLOAT,
        # Boolean
        "bool": DataType.BOOLEAN,
        "boolean": DataType.BOOLEAN,
        "bit": DataType.BOOLEAN,
        # Date / time
        "date": DataType.DATE,
        "time": DataType.TIME,
        "time without time zone": DataType.TIME,
        "time with time zone": DataType.TIME,
        "timetz": DataType.TIME,
        "datetime": DataType.DATETIME,
        "timestamp": DataType.DATETIME,
        "timestamptz": DataType.DATETIME,
        "timestamp without time zone": DataType.DATETIME,
        "timestamp with time zone": DataType.DATETIME,
        # Binary
        "bytea": DataType.BINARY,
        "blob": DataType.BINARY,
        "binary": DataType.BINARY,
        "varbinary": DataType.BINARY,
        "longblob": DataType.BINARY,
        # Others
        "uuid": DataType.GUID,
        "uniqueidentifier": DataType.GUID,
        "json": DataType.JSON,
        "jsonb": DataType.JSON,
        # Names the affinity fallback below would misread
        "interval": DataType.UNKNOWN,
        "point": DataType.UNKNOWN,
    }

    def convert(self, native_type: Any) -> DataType:
        """Convert a relational type name to the canonical data type."""
        if not isinstance(native_type, str):
            return DataType.UNKNOWN

        name = _TYPE_ARGUMENTS.sub("", native_type)
        name = _WHITESPACE.sub(" ", name).strip().lower()
        if not name or name.endswith("[]") or name == "array":
            return DataType.UNKNOWN

        # "int unsigned", "double precision unsigned"
        name = name.replace(" unsigned", "").replace(" zerofill", "")

        if name in self.EXACT_TYPES:
            return self.EXACT_TYPES[name]

        # SQLite type affinity rules for declared types not listed above
        if "int" in name:
            return DataType.INTEGER
        if any(t in name for t in ("char", "clob", "text")):
            return DataType.TEXT
        if "blob" in name:
            return DataType.BINARY
        if any(t in name for t in ("real", "floa", "doub")):
            return DataType.FLOAT
        return DataType.UNKNOWN


class CqlTypeConverter(TypeConverter):
    """Type converter for Cassandra validator class strings and CQL type names."""

    MARSHAL_PREFIX = "org.apache.cassandra.db.marshal."

    VALIDATOR_NAMES: Dict[str, str] = {
        "AsciiType": "ascii",
        "LongType": "bigint",
        "BytesType": "blob",
        "BooleanType": "boolean",
        "CounterColumnType": "counter",
        "SimpleDateType": "date",
        "DecimalType": "decimal",
        "DoubleType": "double",
        "DurationType": "duration",
        "FloatType": "float",
        "InetAddressType": "inet",
        "Int32Type": "int",
        "ShortType": "smallint",
        "UTF8Type": "text",
        "TimeType": "time",
        "TimestampType": "timestamp",
        "DateType": "timestamp",
        "TimeUUIDType": "timeuuid",
        "ByteType": "tinyint",
        "UUIDType": "uuid",
        "IntegerType": "varint",
        "ListType": "list",
        "SetType": "set",
        "MapType": "map",
        "TupleType": "tuple",
    }

    CQL_TYPES: Dict[str, DataType] = {
        "ascii": DataType.TEXT,
        "text": DataType.TEXT,
        "varchar": DataType.TEXT,
        "inet": DataType.TEXT,
        "int": DataType.INTEGER,
        "bigint": DataType.INTEGER,
        "smallint": DataType.INTEGER,
        "tinyint": DataType.INTEGER,
        "varint": DataType.INTEGER,
        "counter": DataType.INTEGER,
        "decimal": DataType.DECIMAL,
        "float": DataType.FLOAT,
        "double": DataType.FLOAT,
        "boolean": DataType.BOOLEAN,
        "date": DataType.DATE,
        "time": DataType.TIME,
        "timestamp": DataType.DATETIME,
        "blob": DataType.BINARY,
        "uuid": DataType.GUID,
        "timeuuid": DataType.GUID,
    }

    # Deeper validators are returned as written and convert to UNKNOWN
    MAX_NESTING = 32

    def validator_to_cql(self, validator: Any, _depth: int = 0) -> str:
        """
        Rewrites a validator class string into its CQL type name.

        ``org.apache.cassandra.db.marshal.ListType(org.apache.cassandra.db.marshal.UTF8Type)``
        becomes ``list<text>``. Strings that are not validators, and validators nested
        more than `MAX_NESTING` levels deep, are returned unchanged.
        """
        if not isinstance(validator, str):
            return ""
        text = validator.strip()
        if not text or _depth > self.MAX_NESTING:
            return text

        name, _, rest = text.partition("(")
        name = name.strip()
        if name.startswith(self.MARSHAL_PREFIX):
            name = name[len(self.MARSHAL_PREFIX):]
        arguments = self._split_arguments(rest[:-1]) if rest.endswith(")") else []

        # Clustering order and frozen wrappers do not change the value type
        if name in ("ReversedType", "FrozenType") and len(arguments) == 1:
            return self.validator_to_cql(arguments[0], _depth + 1)

        if name not in self.VALIDATOR_NAMES:
            return text

        cql_name = self.VALIDATOR_NAMES[name]
        if arguments:
            inner = ", ".join(self.validator_to_cql(argument, _depth + 1) for argument in arguments)
            return f"{cql_name}<{inner}>"
        return cql_name

    def convert(self, native_type: Any) -> DataType:
        """Convert a validator or CQL type name to the canonical data type."""
        if not isinstance(native_type, str):
            return DataType.UNKNOWN

        cql_name = self.validator_to_cql(native_type).lower()
        if cql_name.startswith("frozen<") and cql_name.endswith(">"):
            cql_name = cql_name[len("frozen<"):-1].strip()
        return self.CQL_TYPES.get(cql_name, DataType.UNKNOWN)

    @staticmethod
    def _split_arguments(text: str) -> list:
        """Splits top-level comma separated validator arguments."""
        arguments, depth, current = [], 0, []
        for char in text:
            if char == "(":
                depth += 1
            elif char == ")":
                depth -= 1
            if char == "," and depth == 0:
                arguments.append("".join(current).strip())
                current = []
            else:
                current.append(char)
        if "".join(current).strip():
            arguments.append("".join(current).strip())
        return arguments


_CONVERTERS: Dict[str, TypeConverter] = {
    "postgres": SqlTypeConverter(),
    "sqlite": SqlTypeConverter(),
    "cassandra": CqlTypeConverter(),
}


def get_type_converter(engine: str) -> TypeConverter:
    """Returns the type converter registered for an engine name."""
    try:
        return _CONVERTERS[engine.lower()]
    except KeyError:
        raise UnsupportedEngineError(engine, "type converter") from None
