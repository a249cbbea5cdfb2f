from dbaccess.adapters.base import Command, Connector
from dbaccess.adapters.postgres import PostgresConnector
from dbaccess.adapters.sqlite import SqliteConnector
from dbaccess.adapters.factory import ConnectorFactory, connector_factory

__all__ = [
    "Command",
    "Connector",
    "PostgresConnector",
    "SqliteConnector",
    "ConnectorFactory",
    "connector_factory",
]
