"""
Pytest configuration and fixtures for dbaccess tests.

Environment variables are set before any dbaccess import so that the
module-level Settings() instance sees the test configuration.
"""
import os

os.environ.setdefault("DB_ENGINE", "sqlite")
os.environ.setdefault("DB_URL", ":memory:")
os.environ.setdefault("LOG_STATEMENTS", "true")

from typing import Any, Dict, List, Optional, Sequence, Tuple  # noqa: E402

import pytest  # noqa: E402
import pytest_asyncio  # noqa: E402
from pydantic import BaseModel, ConfigDict, Field  # noqa: E402

from dbaccess.adapters.base import Connector  # noqa: E402
from dbaccess.adapters.sqlite import SqliteConnector  # noqa: E402
from dbaccess.services.database_access import DatabaseAccess  # noqa: E402


class Order(BaseModel):
    """Entity mapped to the Orders table"""
    model_config = ConfigDict(populate_by_name=True)

    __table_name__ = "Orders"
    __key_columns__ = ("Id",)

    id: int = Field(alias="Id")
    name: str = Field(alias="Name")


class FakeConnector(Connector):
    """In-memory connector returning canned rows for statements containing a fragment"""

    def __init__(
        self,
        engine: str = "cassandra",
        responses: Optional[List[Tuple[str, List[Dict[str, Any]]]]] = None,
    ):
        self.engine = engine
        self.responses = responses or []
        self.calls: List[Tuple[str, List[Any]]] = []
        self.closed = False

    @property
    def is_open(self) -> bool:
        return not self.closed

    async def open(self) -> None:
        self.closed = False

    async def close(self) -> None:
        self.closed = True

    async def execute_query(
        self, text: str, params: Optional[Sequence[Any]] = None
    ) -> List[Dict[str, Any]]:
        self.calls.append((text, list(params or [])))
        for fragment, rows in self.responses:
            if fragment in text:
                return [dict(row) for row in rows]
        return []

    async def execute_non_query(
        self, text: str, params: Optional[Sequence[Any]] = None
    ) -> int:
        self.calls.append((text, list(params or [])))
        return 1


class FailingConnector(FakeConnector):
    """Connector whose every statement fails like a driver error"""

    def __init__(self, engine: str, message: str):
        super().__init__(engine)
        self.message = message

    async def execute_query(self, text, params=None):
        self.calls.append((text, list(params or [])))
        raise RuntimeError(self.message)


@pytest.fixture
def fake_connector_factory():
    """Builds FakeConnector instances"""
    return FakeConnector


@pytest_asyncio.fixture
async def sqlite_connector():
    """Open in-memory SQLite connector, closed after the test"""
    connector = SqliteConnector(":memory:")
    await connector.open()
    yield connector
    await connector.close()


@pytest_asyncio.fixture
async def orders_connector(sqlite_connector):
    """SQLite connector with an Orders table seeded with two rows"""
    await sqlite_connector.execute_non_query(
        'CREATE TABLE "Orders" ("Id" INTEGER PRIMARY KEY, "Name" VARCHAR(50) NOT NULL)'
    )
    async with DatabaseAccess(sqlite_connector, Order) as access:
        await access.insert(Order(Id=1, Name="First order"), Order(Id=2, Name="Second order"))
    return sqlite_connector
