"""Base connector interface"""

import logging
from abc import ABC, abstractmethod
from typing import Any, Dict, List, Optional, Sequence

from dbaccess.core.config import settings
from dbaccess.core.error_utils import describe_statement
from dbaccess.core.exceptions import ObjectDisposedError

logger = logging.getLogger(__name__)


class Connector(ABC):
    """Abstract base class for connectors to one live database"""

    # Engine name used to pick dialects, type converters and schema providers
    engine: str = ""

    @abstractmethod
    async def open(self) -> None:
        """Establish database connection"""
        pass

    @abstractmethod
    async def close(self) -> None:
        """Close database connection"""
        pass

    @property
    @abstractmethod
    def is_open(self) -> bool:
        """Whether the connection is established"""
        pass

    @abstractmethod
    async def execute_query(
        self, text: str, params: Optional[Sequence[Any]] = None
    ) -> List[Dict[str, Any]]:
        """Execute a statement and return its rows as column-keyed dicts"""
        pass

    @abstractmethod
    async def execute_non_query(
        self, text: str, params: Optional[Sequence[Any]] = None
    ) -> int:
        """Execute a statement and return the number of affected rows"""
        pass

    def create_command(self, text: str) -> "Command":
        """Create a reusable command bound to this connector"""
        return Command(self, text)

    def log_statement(self, text: str, params: Optional[Sequence[Any]]) -> None:
        if settings.LOG_STATEMENTS:
            logger.debug(f"[{self.engine}] {describe_statement(text, params)}")

    async def __aenter__(self) -> "Connector":
        await self.open()
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        await self.close()


class Command:
    """
    A statement resource borrowed from a connector.

    The command keeps the base statement text. Every call receives its own
    text and parameters, so nothing set for one call is seen by the next.
    Closing the command releases the connector reference.
    """

    def __init__(self, connector: Connector, text: str):
        self.connector: Optional[Connector] = connector
        self.text = text

    @property
    def is_closed(self) -> bool:
        return self.connector is None

    async def fetch(self, text: str, params: Sequence[Any] = ()) -> List[Dict[str, Any]]:
        if self.is_closed:
            raise ObjectDisposedError(type(self).__name__)
        return await self.connector.execute_query(text, list(params))

    def close(self) -> None:
        self.connector = None
