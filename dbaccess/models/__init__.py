from dbaccess.models.mapping import ColumnMapping, TableMapping
from dbaccess.models.schema import (
    Column,
    Constraint,
    ConstraintType,
    DataType,
    Parameter,
    ParameterDirection,
    StoredProcedure,
    Table,
    TableKind,
    TableSchema,
    View,
)

__all__ = [
    "Column",
    "ColumnMapping",
    "Constraint",
    "ConstraintType",
    "DataType",
    "Parameter",
    "ParameterDirection",
    "StoredProcedure",
    "Table",
    "TableKind",
    "TableMapping",
    "TableSchema",
    "View",
]
