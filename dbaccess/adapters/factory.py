"""
This module defines the `ConnectorFactory`, a centralized factory for creating,
caching and shutting down connectors.

The factory is responsible for:
- Mapping engine names to connector classes, with registration of third-party
  connectors (e.g. a Cassandra driver) under their engine name.
- Lazily creating and opening named connectors, caching them for reuse.
- Building the default connector from the library settings.
- Providing a singleton instance (`connector_factory`) for global access.
"""

import asyncio
import logging
from typing import Callable, Dict, Optional

from dbaccess.adapters.base import Connector
from dbaccess.adapters.postgres import PostgresConnector
from dbaccess.adapters.sqlite import SqliteConnector
from dbaccess.core.config import settings
from dbaccess.core.error_utils import redact_url, safe_log_warning
from dbaccess.core.exceptions import UnsupportedEngineError

logger = logging.getLogger(__name__)

ConnectorBuilder = Callable[[str], Connector]


class ConnectorFactory:
    """
    A factory for creating and managing named connectors.

    Connectors are created and opened only when first requested, then cached
    until `shutdown` is called.
    """

    def __init__(self):
        self._builders: Dict[str, ConnectorBuilder] = {
            "postgres": PostgresConnector,
            "sqlite": SqliteConnector,
        }
        self._connectors: Dict[str, Connector] = {}

    def register(self, engine: str, builder: ConnectorBuilder) -> None:
        """
        Registers a connector class (or any callable taking a URL) for an engine.

        Args:
            engine: The engine name, e.g. "cassandra".
            builder: Callable building an unopened connector from a URL.
        """
        self._builders[engine.lower()] = builder

    def create(self, engine: str, url: str) -> Connector:
        """
        Creates an unopened connector for an engine.

        Raises:
            UnsupportedEngineError: If no connector is registered for the engine.
        """
        builder = self._builders.get(engine.lower())
        if builder is None:
            raise UnsupportedEngineError(engine, "connector")
        return builder(url)

    async def get(
        self, name: str, engine: Optional[str] = None, url: Optional[str] = None
    ) -> Connector:
        """
        Retrieves (and lazily creates and opens) a named connector.

        Args:
            name: Cache key of the connector.
            engine: Engine name, defaults to `settings.DB_ENGINE`.
            url: Connection URL, defaults to `settings.DB_URL`.

        Returns:
            An open `Connector`.
        """
        if name not in self._connectors:
            url = url or settings.DB_URL
            connector = self.create(engine or settings.DB_ENGINE, url)
            await connector.open()
            self._connectors[name] = connector
            logger.info(
                f"Connector '{name}' opened (engine: {connector.engine}, url: {redact_url(url)})"
            )
        return self._connectors[name]

    async def from_settings(self) -> Connector:
        """Returns the default connector described by the settings."""
        return await self.get("default")

    async def shutdown(self) -> None:
        """
        Closes all cached connectors and clears the cache.

        Errors while closing are logged, not raised, so every connector gets
        its chance to close.
        """
        logger.info(f"Shutting down {len(self._connectors)} connector(s)...")
        for name, connector in self._connectors.items():
            try:
                await asyncio.wait_for(connector.close(), timeout=2.0)
                logger.debug(f"Closed connector {name}")
            except asyncio.TimeoutError:
                logger.warning(f"Timeout closing connector {name}")
            except Exception as e:
                safe_log_warning(logger, f"Error closing connector {name}: {e}")

        self._connectors.clear()
        logger.info("Connector factory shutdown complete")


# Singleton instance of the factory for global use.
connector_factory = ConnectorFactory()
