"""Engine-neutral schema reading and typed queries over relational and column-family stores."""

from dbaccess.adapters import Connector, ConnectorFactory, connector_factory
from dbaccess.commands import CommandBuilder, Dialect, get_dialect
from dbaccess.converters import get_type_converter
from dbaccess.core.exceptions import (
    ConnectorNotOpenError,
    DbAccessError,
    MappingError,
    ObjectDisposedError,
    UnsupportedEngineError,
)
from dbaccess.models import DataType, TableMapping
from dbaccess.querying import QueryExecutor, custom_query, query
from dbaccess.schema import SchemaProvider, create_schema_provider
from dbaccess.services import DatabaseAccess

__version__ = "0.1.0"

__all__ = [
    "CommandBuilder",
    "Connector",
    "ConnectorFactory",
    "ConnectorNotOpenError",
    "DataType",
    "DatabaseAccess",
    "DbAccessError",
    "Dialect",
    "MappingError",
    "ObjectDisposedError",
    "QueryExecutor",
    "SchemaProvider",
    "TableMapping",
    "UnsupportedEngineError",
    "connector_factory",
    "create_schema_provider",
    "custom_query",
    "get_dialect",
    "get_type_converter",
    "query",
]
