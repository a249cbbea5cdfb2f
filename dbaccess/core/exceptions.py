"""Exceptions raised by dbaccess.

Driver errors (asyncpg, sqlite3, ...) are never wrapped here: catalog reads and
statement execution let them propagate with the engine's own message.
"""


class DbAccessError(Exception):
    """Base class for dbaccess errors."""


class ObjectDisposedError(DbAccessError, ReferenceError):
    """An operation was attempted on a disposed query executor or facade."""

    def __init__(self, object_name: str):
        self.object_name = object_name
        super().__init__(f"Cannot use {object_name} after it has been disposed")


class MappingError(DbAccessError):
    """A table mapping does not fit the statement or the table schema."""


class UnsupportedEngineError(DbAccessError, ValueError):
    """No dialect, schema provider or connector is registered for an engine."""

    def __init__(self, engine: str, component: str):
        self.engine = engine
        self.component = component
        super().__init__(f"No {component} registered for engine '{engine}'")


class ConnectorNotOpenError(DbAccessError):
    """A statement was dispatched through a connector that is not open."""
