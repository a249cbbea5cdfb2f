"""Entity-to-table mapping models"""
from typing import Any, Dict, List, Optional, Sequence, Type

from pydantic import BaseModel, ConfigDict

from dbaccess.core.exceptions import MappingError


class ColumnMapping(BaseModel):
    """One mapped column"""
    model_config = ConfigDict(frozen=True)

    column_name: str
    field_name: str
    native_type: Optional[str] = None


class TableMapping(BaseModel):
    """Table name, ordered columns and key columns of a mapped entity"""
    model_config = ConfigDict(frozen=True)

    table_name: str
    columns: List[ColumnMapping]
    key_columns: List[str] = []

    @classmethod
    def from_model(
        cls,
        model: Type[BaseModel],
        table_name: Optional[str] = None,
        key_columns: Optional[Sequence[str]] = None,
    ) -> "TableMapping":
        """
        Builds a mapping from a pydantic model class.

        Field aliases are used as column names. When not given explicitly, the
        table name and key columns are read from the model's ``__table_name__``
        and ``__key_columns__`` class attributes.

        Args:
            model: The entity model class.
            table_name: Table name, defaults to ``__table_name__`` or the class name.
            key_columns: Key column names.

        Returns:
            A `TableMapping` for the model.
        """
        columns = []
        for field_name, info in model.model_fields.items():
            native_type = None
            if isinstance(info.json_schema_extra, dict):
                native_type = info.json_schema_extra.get("native_type")
            columns.append(
                ColumnMapping(
                    column_name=info.alias or field_name,
                    field_name=field_name,
                    native_type=native_type,
                )
            )

        if not columns:
            raise MappingError(f"Model {model.__name__} has no fields to map")

        mapping = cls(
            table_name=table_name or getattr(model, "__table_name__", model.__name__),
            columns=columns,
            key_columns=list(key_columns or getattr(model, "__key_columns__", ())),
        )
        mapping.validate_keys()
        return mapping

    @property
    def column_names(self) -> List[str]:
        return [column.column_name for column in self.columns]

    @property
    def non_key_columns(self) -> List[ColumnMapping]:
        return [c for c in self.columns if c.column_name not in self.key_columns]

    def get_column(self, column_name: str) -> ColumnMapping:
        for column in self.columns:
            if column.column_name == column_name:
                return column
        raise MappingError(
            f"Column '{column_name}' is not mapped for table '{self.table_name}'"
        )

    def with_key_columns(self, key_columns: Sequence[str]) -> "TableMapping":
        mapping = self.model_copy(update={"key_columns": list(key_columns)})
        mapping.validate_keys()
        return mapping

    def validate_keys(self) -> None:
        names = set(self.column_names)
        missing = [key for key in self.key_columns if key not in names]
        if missing:
            raise MappingError(
                f"Key columns {missing} are not mapped for table '{self.table_name}'"
            )

    def to_row(self, entity: BaseModel) -> Dict[str, Any]:
        """Column-name keyed values of an entity."""
        return {c.column_name: getattr(entity, c.field_name) for c in self.columns}

    def from_row(self, entity_type: Type[BaseModel], row: Dict[str, Any]) -> BaseModel:
        """Materializes one result row into an entity; unmapped row columns are ignored."""
        data = {c.column_name: row[c.column_name] for c in self.columns if c.column_name in row}
        return entity_type.model_validate(data)
