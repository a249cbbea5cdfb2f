from dbaccess.commands.builder import CommandBuilder, Statement, append_where
from dbaccess.commands.dialects import (
    CASSANDRA,
    POSTGRES,
    SQLITE,
    Dialect,
    get_dialect,
    register_dialect,
)

__all__ = [
    "CommandBuilder",
    "Statement",
    "append_where",
    "CASSANDRA",
    "POSTGRES",
    "SQLITE",
    "Dialect",
    "get_dialect",
    "register_dialect",
]
