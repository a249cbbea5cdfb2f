"""
Tests for the reusable query executor: reuse, predicate isolation and disposal.
"""
import pytest

from dbaccess.core.exceptions import ObjectDisposedError
from dbaccess.querying import ExecutorState, QueryExecutor, custom_query, query
from tests.conftest import FailingConnector, FakeConnector, Order

ROWS = [{"Id": 1, "Name": "First order"}, {"Id": 2, "Name": "Second order"}]


def fake_orders_connector():
    return FakeConnector(engine="sqlite", responses=[('FROM "Orders"', ROWS)])


@pytest.mark.asyncio
async def test_execute_materializes_entities(orders_connector):
    """Rows become fresh entities of the bound type"""
    with QueryExecutor(orders_connector, Order) as executor:
        result = await executor.execute()

    assert len(result) == 2
    assert all(isinstance(entity, Order) for entity in result)
    assert {entity.name for entity in result} == {"First order", "Second order"}


@pytest.mark.asyncio
async def test_executor_is_reusable(orders_connector):
    """Executing twice returns independent lists of the same size"""
    executor = QueryExecutor(orders_connector, Order)

    first = await executor.execute()
    second = await executor.execute()

    assert len(second) == len(first) == 2
    assert first is not second
    executor.dispose()


@pytest.mark.asyncio
async def test_predicate_does_not_remain_in_executor(orders_connector):
    """A predicate applies to its own call only"""
    executor = QueryExecutor(orders_connector, Order)

    unfiltered = await executor.execute()
    filtered = await executor.execute('"Id" = ?', 1)
    unfiltered_again = await executor.execute()

    assert len(filtered) == 1
    assert filtered[0].id == 1
    assert unfiltered_again == unfiltered
    executor.dispose()


@pytest.mark.asyncio
async def test_predicate_first_then_none(orders_connector):
    executor = QueryExecutor(orders_connector, Order)

    filtered = await executor.execute('"Id" = 1')
    unfiltered = await executor.execute()

    assert len(filtered) != len(unfiltered)
    executor.dispose()


@pytest.mark.asyncio
async def test_statement_text_per_call():
    """Each call dispatches the base statement plus that call's predicate only"""
    connector = fake_orders_connector()
    executor = QueryExecutor(connector, Order)

    await executor.execute()
    await executor.execute('"Id" = ?', 1)
    await executor.execute()

    base = 'SELECT "Id", "Name" FROM "Orders"'
    assert connector.calls == [
        (base, []),
        (f'{base} WHERE "Id" = ?', [1]),
        (base, []),
    ]
    assert executor.statement == base


@pytest.mark.asyncio
async def test_disposing_twice_is_ok():
    """Dispose is idempotent"""
    executor = QueryExecutor(fake_orders_connector(), Order)

    executor.dispose()
    executor.dispose()

    assert executor.state is ExecutorState.DISPOSED
    assert executor.is_disposed


@pytest.mark.asyncio
async def test_disposed_executor_cannot_execute():
    """Executing after disposal fails every time without touching the connector"""
    connector = fake_orders_connector()
    executor = QueryExecutor(connector, Order)
    await executor.execute()
    executor.dispose()

    for _ in range(2):
        with pytest.raises(ObjectDisposedError):
            await executor.execute()
    with pytest.raises(ReferenceError):
        await executor.execute('"Id" = 1')
    assert len(connector.calls) == 1


@pytest.mark.asyncio
async def test_disposal_does_not_close_connector():
    """The connector is borrowed, not owned"""
    connector = fake_orders_connector()

    with QueryExecutor(connector, Order):
        pass

    assert connector.is_open


@pytest.mark.asyncio
async def test_context_manager_disposes_on_error():
    """Disposal runs on the exception path too"""
    executor = QueryExecutor(FailingConnector("sqlite", "no such table: Orders"), Order)

    with pytest.raises(RuntimeError, match="no such table: Orders"):
        async with executor:
            await executor.execute()

    assert executor.is_disposed


@pytest.mark.asyncio
async def test_engine_errors_keep_their_message(sqlite_connector):
    """Statement failures come from the driver with its own diagnostic text"""
    executor = QueryExecutor(sqlite_connector, Order)

    with pytest.raises(Exception, match="no such table"):
        await executor.execute()
    executor.dispose()


@pytest.mark.asyncio
async def test_single_use_helpers(orders_connector):
    """query() and custom_query() run once over a scoped executor"""
    everything = await query(orders_connector, Order)
    one = await query(orders_connector, Order, '"Name" LIKE ?', "Second%")
    none = await query(orders_connector, Order, '"Name" LIKE ?', "Non Existent%")
    custom = await custom_query(
        orders_connector, Order, 'SELECT "Id", "Name", 1 AS "Extra" FROM "Orders" WHERE "Id" = ?', 2
    )

    assert len(everything) == 2
    assert [o.id for o in one] == [2]
    assert none == []
    assert [o.name for o in custom] == ["Second order"]


@pytest.mark.asyncio
async def test_closed_command_refuses_to_fetch():
    """Closing a command releases the connector; fetching afterwards fails"""
    connector = fake_orders_connector()
    command = connector.create_command('SELECT "Id", "Name" FROM "Orders"')

    rows = await command.fetch(command.text)
    command.close()

    assert len(rows) == 2
    assert command.is_closed
    with pytest.raises(ObjectDisposedError):
        await command.fetch(command.text)
    assert len(connector.calls) == 1


@pytest.mark.asyncio
async def test_custom_statement_with_own_filter_runs_without_predicate(orders_connector):
    """Statements that already filter are executed as written"""
    with QueryExecutor(orders_connector, Order, statement='SELECT "Id", "Name" FROM "Orders" WHERE "Id" > 1') as executor:
        result = await executor.execute()

    assert [o.id for o in result] == [2]
