from dbaccess.querying.executor import ExecutorState, QueryExecutor, custom_query, query

__all__ = [
    "ExecutorState",
    "QueryExecutor",
    "custom_query",
    "query",
]
