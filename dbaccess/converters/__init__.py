from dbaccess.converters.types import (
    CqlTypeConverter,
    SqlTypeConverter,
    TypeConverter,
    get_type_converter,
)

__all__ = [
    "CqlTypeConverter",
    "SqlTypeConverter",
    "TypeConverter",
    "get_type_converter",
]
