"""Schema provider selection by engine name"""

from typing import Callable, Dict, Optional

from dbaccess.adapters.base import Connector
from dbaccess.core.exceptions import UnsupportedEngineError
from dbaccess.schema.base import SchemaProvider
from dbaccess.schema.column_family import ColumnFamilySchemaProvider
from dbaccess.schema.relational import (
    POSTGRES_CATALOG,
    SQLITE_CATALOG,
    RelationalSchemaProvider,
)

ProviderBuilder = Callable[[Connector], SchemaProvider]

_PROVIDERS: Dict[str, ProviderBuilder] = {
    "postgres": lambda connector: RelationalSchemaProvider(connector, POSTGRES_CATALOG),
    "sqlite": lambda connector: RelationalSchemaProvider(connector, SQLITE_CATALOG),
    "cassandra": ColumnFamilySchemaProvider,
}


def register_schema_provider(engine: str, builder: ProviderBuilder) -> None:
    """Registers the schema provider used for an engine name."""
    _PROVIDERS[engine.lower()] = builder


def create_schema_provider(
    connector: Connector, engine: Optional[str] = None
) -> SchemaProvider:
    """
    Creates the schema provider for a connector.

    Args:
        connector: The connector the provider reads the catalog through.
        engine: Engine name; defaults to the connector's engine.

    Raises:
        UnsupportedEngineError: If no provider is registered for the engine.
    """
    name = (engine or connector.engine).lower()
    builder = _PROVIDERS.get(name)
    if builder is None:
        raise UnsupportedEngineError(name, "schema provider")
    return builder(connector)
