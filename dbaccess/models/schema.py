"""Schema descriptor models"""
from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, ConfigDict


class DataType(str, Enum):
    """Canonical, engine-neutral column type"""
    TEXT = "text"
    INTEGER = "integer"
    DECIMAL = "decimal"
    FLOAT = "float"
    BOOLEAN = "boolean"
    DATE = "date"
    TIME = "time"
    DATETIME = "datetime"
    BINARY = "binary"
    GUID = "guid"
    JSON = "json"
    UNKNOWN = "unknown"


class TableKind(str, Enum):
    """Kind of catalog object"""
    TABLE = "table"
    VIEW = "view"
    OTHER = "other"

    @classmethod
    def from_catalog(cls, value: Optional[str]) -> "TableKind":
        """Normalize an engine-specific kind string ("BASE TABLE", "Standard", "view", ...)."""
        normalized = (value or "").strip().lower()
        if normalized in ("base table", "table", "standard"):
            return cls.TABLE
        if normalized in ("view", "materialized view", "system view"):
            return cls.VIEW
        return cls.OTHER


class ConstraintType(str, Enum):
    """Constraint kind"""
    PRIMARY_KEY = "primary_key"
    FOREIGN_KEY = "foreign_key"
    UNIQUE = "unique"
    CHECK = "check"
    OTHER = "other"

    @classmethod
    def from_catalog(cls, value: Optional[str]) -> "ConstraintType":
        normalized = (value or "").strip().upper().replace("_", " ")
        return {
            "PRIMARY KEY": cls.PRIMARY_KEY,
            "FOREIGN KEY": cls.FOREIGN_KEY,
            "UNIQUE": cls.UNIQUE,
            "CHECK": cls.CHECK,
        }.get(normalized, cls.OTHER)


class ParameterDirection(str, Enum):
    """Stored routine parameter mode"""
    IN = "in"
    OUT = "out"
    INOUT = "inout"
    RETURN = "return"

    @classmethod
    def from_catalog(cls, value: Optional[str]) -> "ParameterDirection":
        normalized = (value or "IN").strip().lower()
        try:
            return cls(normalized)
        except ValueError:
            return cls.IN


class _Descriptor(BaseModel):
    """Immutable snapshot of catalog state"""
    model_config = ConfigDict(frozen=True)


class Table(_Descriptor):
    """Table descriptor"""
    database: str
    name: str
    kind: TableKind = TableKind.TABLE


class View(Table):
    """View descriptor"""
    kind: TableKind = TableKind.VIEW


class Column(_Descriptor):
    """Column descriptor"""
    database: str
    table_name: str
    name: str
    ordinal: int
    native_type: str
    data_type: DataType
    is_nullable: bool = True
    max_length: Optional[int] = None
    precision: Optional[int] = None
    scale: Optional[int] = None
    default: Optional[str] = None
    # Column-family key role ("partition_key", "clustering_key", "regular", ...)
    key_role: Optional[str] = None


class Constraint(_Descriptor):
    """Constraint descriptor, one per (constraint, column) pair"""
    database: str
    table_name: str
    name: str
    type: ConstraintType
    from_column_name: str
    to_table_name: Optional[str] = None
    to_column_name: Optional[str] = None
    position: int = 1


class StoredProcedure(_Descriptor):
    """Stored routine descriptor"""
    database: str
    name: str
    routine_type: str = "PROCEDURE"


class Parameter(_Descriptor):
    """Stored routine parameter descriptor"""
    database: str
    routine_name: str
    name: str
    position: int
    direction: ParameterDirection = ParameterDirection.IN
    native_type: str = ""
    data_type: DataType = DataType.UNKNOWN


class TableSchema(BaseModel):
    """Table together with its columns and constraints"""
    table: Table
    columns: List[Column] = []
    constraints: List[Constraint] = []

    @property
    def column_names(self) -> List[str]:
        return [column.name for column in self.columns]

    @property
    def primary_key_columns(self) -> List[str]:
        keys = [c for c in self.constraints if c.type == ConstraintType.PRIMARY_KEY]
        return [c.from_column_name for c in sorted(keys, key=lambda c: c.position)]

    def get_column(self, name: str) -> Optional[Column]:
        for column in self.columns:
            if column.name == name:
                return column
        return None
