"""
Table Store backed by Redis

Tables are sets of string-valued rows. Each row is a Redis HASH and each
table keeps the keys of its rows in a Redis SET so it can be scanned.

Redis Keys:
- offdays:{table}:keys        : SET - Row keys of the table
- offdays:{table}:row:{key}   : HASH - One row (column -> value)

Scans evaluate filter conditions client side, the same way a document store
applies a filter expression after reading the table. Exact-key queries are a
single HGETALL.
"""
import logging
from dataclasses import dataclass
from typing import Any, Callable, Dict, Iterable, List, Optional, Protocol, Sequence, Tuple

import redis.asyncio as redis

from offdays.redis_manager import get_redis_client

logger = logging.getLogger(__name__)

Row = Dict[str, str]


# ============================================================================
# FILTER CONDITIONS
# ============================================================================

class Condition:
    """Base class for scan filters"""

    def matches(self, row: Row) -> bool:
        raise NotImplementedError

    def __and__(self, other: 'Condition') -> 'Condition':
        return AllOf((self, other))

    def __or__(self, other: 'Condition') -> 'Condition':
        return AnyOf((self, other))


@dataclass(frozen=True)
class Eq(Condition):
    """``attr = value``"""
    attr: str
    value: str

    def matches(self, row: Row) -> bool:
        return row.get(self.attr) == self.value


@dataclass(frozen=True)
class In(Condition):
    """``attr IN (values...)``"""
    attr: str
    values: Tuple[str, ...]

    def matches(self, row: Row) -> bool:
        return row.get(self.attr) in self.values


@dataclass(frozen=True)
class Spans(Condition):
    """``start_attr <= value And end_attr >= value``

    Values are compared as strings, so dates must be stored ISO formatted.
    """
    start_attr: str
    end_attr: str
    value: str

    def matches(self, row: Row) -> bool:
        start, end = row.get(self.start_attr), row.get(self.end_attr)
        if start is None or end is None:
            return False
        return start <= self.value <= end


@dataclass(frozen=True)
class AllOf(Condition):
    conditions: Tuple[Condition, ...]

    def matches(self, row: Row) -> bool:
        return all(c.matches(row) for c in self.conditions)


@dataclass(frozen=True)
class AnyOf(Condition):
    conditions: Tuple[Condition, ...]

    def matches(self, row: Row) -> bool:
        return any(c.matches(row) for c in self.conditions)


def project(row: Row, projection: Optional[Sequence[str]]) -> Row:
    """Keep only the projected columns that the row actually has"""
    if projection is None:
        return dict(row)
    return {col: row[col] for col in projection if col in row}


# ============================================================================
# STORE
# ============================================================================

class TableStore(Protocol):
    """What the classification engine needs from the store"""

    async def scan(self, table: str, where: Optional[Condition] = None,
                   projection: Optional[Sequence[str]] = None) -> List[Row]:
        ...

    async def query(self, table: str, key: str) -> List[Row]:
        ...


class RedisTableStore:
    """
    Redis implementation of ``TableStore``

    Rows come back in key order so repeated scans are deterministic.
    """

    def __init__(self, client: Optional[redis.Redis] = None, key_prefix: str = "offdays"):
        self.redis = client if client is not None else get_redis_client()
        self.key_prefix = key_prefix

    def _index_key(self, table: str) -> str:
        return f"{self.key_prefix}:{table}:keys"

    def _row_key(self, table: str, key: str) -> str:
        return f"{self.key_prefix}:{table}:row:{key}"

    async def scan(self, table: str, where: Optional[Condition] = None,
                   projection: Optional[Sequence[str]] = None) -> List[Row]:
        """
        Read every row of a table and apply an optional filter

        Args:
            table: Table name
            where: Filter condition evaluated per row
            projection: Columns to keep (None = all)

        Returns:
            Matching rows
        """
        keys = sorted(await self.redis.smembers(self._index_key(table)))
        if not keys:
            return []

        async with self.redis.pipeline(transaction=False) as pipe:
            for key in keys:
                pipe.hgetall(self._row_key(table, key))
            rows = await pipe.execute()

        matched = [
            project(row, projection)
            for row in rows
            if row and (where is None or where.matches(row))
        ]
        logger.debug(f"scan {table}: {len(matched)}/{len(keys)} rows matched")
        return matched

    async def query(self, table: str, key: str) -> List[Row]:
        """Exact-key lookup; returns zero or one row"""
        row = await self.redis.hgetall(self._row_key(table, key))
        return [row] if row else []

    async def put_rows(self, table: str, rows: Iterable[Dict[str, Any]],
                       row_key: Callable[[Dict[str, Any]], str]) -> int:
        """
        Insert or replace rows

        Args:
            table: Table name
            rows: Rows to write (None values are dropped)
            row_key: Builds the row key from a row

        Returns:
            Number of rows written
        """
        count = 0
        async with self.redis.pipeline(transaction=True) as pipe:
            for row in rows:
                key = str(row_key(row))
                mapping = {col: str(value) for col, value in row.items() if value is not None}
                redis_key = self._row_key(table, key)
                pipe.delete(redis_key)
                if mapping:
                    pipe.hset(redis_key, mapping=mapping)
                pipe.sadd(self._index_key(table), key)
                count += 1
            await pipe.execute()
        logger.info(f"Loaded {count} rows into {table}")
        return count

    async def ping(self) -> bool:
        try:
            return bool(await self.redis.ping())
        except redis.RedisError as e:
            logger.warning(f"Redis ping failed: {e}")
            return False

    async def count(self, table: str) -> int:
        return await self.redis.scard(self._index_key(table))

    async def clear(self, table: str) -> int:
        """Delete a table and all its rows"""
        keys = await self.redis.smembers(self._index_key(table))
        if keys:
            await self.redis.delete(*[self._row_key(table, k) for k in keys])
        await self.redis.delete(self._index_key(table))
        logger.warning(f"Table {table} cleared ({len(keys)} rows)")
        return len(keys)
