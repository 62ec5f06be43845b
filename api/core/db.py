"""
Async database gateway (raw SQL) using asyncpg.

`Database` owns the connection pool. FastAPI creates it on startup, keeps it on
`app.state.db` and closes it on shutdown (see `api/main.py`). Handlers receive
it through the `get_db` dependency.

SQL parameter style:
- asyncpg uses positional placeholders: $1, $2, $3, ...
"""

from __future__ import annotations

import asyncio
import logging
import os
from contextlib import asynccontextmanager
from typing import Any, AsyncIterator
from urllib.parse import parse_qsl, quote, urlencode, urlsplit, urlunsplit

import asyncpg
from fastapi import Request

from .errors import DatabaseError

DEFAULT_DATABASE_NAME = "SNDBaseISap"
DEFAULT_POOL_MAX_SIZE = 8
DEFAULT_ACQUIRE_TIMEOUT_S = 10.0
DEFAULT_COMMAND_TIMEOUT_S = 30.0

_DRIVER_ERRORS = (asyncpg.PostgresError, asyncpg.InterfaceError, OSError, asyncio.TimeoutError)

logger = logging.getLogger(__name__)


def _env_int(name: str, default: int) -> int:
    raw = os.environ.get(name, "").strip()
    if not raw:
        return default
    try:
        return int(raw)
    except ValueError:
        return default


def _env_float(name: str, default: float) -> float:
    raw = os.environ.get(name, "").strip()
    if not raw:
        return default
    try:
        return float(raw)
    except ValueError:
        return default


def _sanitize_database_url(url: str) -> str:
    parts = urlsplit(url)
    if not parts.query:
        return url

    params = [(k, v) for (k, v) in parse_qsl(parts.query, keep_blank_values=True) if k != "sslmode"]
    query = urlencode(params)
    return urlunsplit((parts.scheme, parts.netloc, parts.path, query, parts.fragment))


def database_url() -> str:
    """
    DSN for the nesting database.

    `DATABASE_URL` wins when set; otherwise the DSN is assembled from the
    `SNDB_*` variables, where user and password are required.
    """
    url = os.environ.get("DATABASE_URL", "").strip()
    if url:
        return _sanitize_database_url(url)

    user = os.environ.get("SNDB_USER", "").strip()
    password = os.environ.get("SNDB_PWD", "")
    if not user or not password:
        raise RuntimeError("Neither DATABASE_URL nor SNDB_USER/SNDB_PWD is set.")

    host = os.environ.get("SNDB_HOST", "localhost").strip() or "localhost"
    port = _env_int("SNDB_PORT", 5432)
    name = os.environ.get("SNDB_NAME", DEFAULT_DATABASE_NAME).strip() or DEFAULT_DATABASE_NAME
    return f"postgresql://{quote(user, safe='')}:{quote(password, safe='')}@{host}:{port}/{name}"


def pool_max_size() -> int:
    value = _env_int("DB_POOL_MAX_SIZE", DEFAULT_POOL_MAX_SIZE)
    return value if value > 0 else DEFAULT_POOL_MAX_SIZE


def acquire_timeout_s() -> float:
    value = _env_float("DB_ACQUIRE_TIMEOUT_S", DEFAULT_ACQUIRE_TIMEOUT_S)
    return value if value > 0 else DEFAULT_ACQUIRE_TIMEOUT_S


def command_timeout_s() -> float:
    value = _env_float("DB_COMMAND_TIMEOUT_S", DEFAULT_COMMAND_TIMEOUT_S)
    return value if value > 0 else DEFAULT_COMMAND_TIMEOUT_S


def _record_to_dict(record: Any) -> dict[str, Any]:
    return dict(record)


class Database:
    """
    Bounded connection pool plus query helpers.

    Every driver failure (including waiting too long for a free connection)
    surfaces as `DatabaseError`. Nothing here retries.
    """

    def __init__(self, pool: Any, *, acquire_timeout: float = DEFAULT_ACQUIRE_TIMEOUT_S) -> None:
        self._pool = pool
        self.acquire_timeout = acquire_timeout

    @asynccontextmanager
    async def acquire_connection(self) -> AsyncIterator[Any]:
        try:
            conn = await self._pool.acquire(timeout=self.acquire_timeout)
        except asyncio.TimeoutError as e:
            raise DatabaseError(
                f"Timed out after {self.acquire_timeout}s waiting for a database connection."
            ) from e
        except _DRIVER_ERRORS as e:
            raise DatabaseError(f"Failed to acquire a database connection: {e}") from e

        try:
            yield conn
        finally:
            await self._pool.release(conn)

    async def fetch_one(self, sql: str, *args: Any) -> dict[str, Any] | None:
        """
        Run a query and return a single row as a dict (or None).
        """
        async with self.acquire_connection() as conn:
            try:
                row = await conn.fetchrow(sql, *args)
            except _DRIVER_ERRORS as e:
                raise DatabaseError(f"Query failed: {e}") from e
        return _record_to_dict(row) if row is not None else None

    async def fetch_all(self, sql: str, *args: Any) -> list[dict[str, Any]]:
        """
        Run a query and return all rows as a list of dicts.
        """
        async with self.acquire_connection() as conn:
            try:
                rows = await conn.fetch(sql, *args)
            except _DRIVER_ERRORS as e:
                raise DatabaseError(f"Query failed: {e}") from e
        return [_record_to_dict(r) for r in rows]

    async def execute(self, sql: str, *args: Any) -> str:
        """
        Run a statement (INSERT/UPDATE/DELETE). Returns the command status, e.g. `INSERT 0 1`.
        """
        async with self.acquire_connection() as conn:
            try:
                return await conn.execute(sql, *args)
            except _DRIVER_ERRORS as e:
                raise DatabaseError(f"Statement failed: {e}") from e

    async def close(self) -> None:
        await self._pool.close()


def affected_rows(status: str | None) -> int:
    """
    Row count from a command status string (`INSERT 0 1` -> 1, `DELETE 3` -> 3).
    """
    try:
        return int((status or "").rsplit(" ", 1)[-1])
    except ValueError:
        return 0


async def create_database() -> Database:
    pool = await asyncpg.create_pool(
        dsn=database_url(),
        min_size=1,
        max_size=pool_max_size(),
        command_timeout=command_timeout_s(),
    )
    logger.info("database connected max_size=%s", pool_max_size())
    return Database(pool, acquire_timeout=acquire_timeout_s())


def get_db(request: Request) -> Database:
    db = getattr(request.app.state, "db", None)
    if db is None:
        raise RuntimeError("Database is not initialized. Create it in the app lifespan.")
    return db
