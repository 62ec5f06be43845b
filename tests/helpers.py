import asyncio

from batches.schemas import Batch

_DEFAULT_RESULTS = {"fetch": [], "fetchrow": None, "execute": "INSERT 0 1"}


def normalize_sql(sql: str) -> str:
    return " ".join(sql.split())


class FakeConnection:
    """
    Stands in for an asyncpg connection: records every call and replays
    queued results (or raises a configured error) per method.
    """

    def __init__(self):
        self.calls = []
        self._queued = {"fetch": [], "fetchrow": [], "execute": []}
        self._errors = {}

    def queue(self, method, result):
        self._queued[method].append(result)

    def fail(self, method, exc):
        self._errors[method] = exc

    def calls_to(self, method):
        return [c for c in self.calls if c[0] == method]

    async def _call(self, method, sql, args):
        self.calls.append((method, normalize_sql(sql), args))
        if method in self._errors:
            raise self._errors[method]
        if self._queued[method]:
            return self._queued[method].pop(0)
        return _DEFAULT_RESULTS[method]

    async def fetch(self, sql, *args):
        return await self._call("fetch", sql, args)

    async def fetchrow(self, sql, *args):
        return await self._call("fetchrow", sql, args)

    async def execute(self, sql, *args):
        return await self._call("execute", sql, args)


class FakePool:
    def __init__(self, conn, acquire_error=None):
        self.conn = conn
        self.acquire_error = acquire_error
        self.acquired = 0
        self.released = 0
        self.timeouts = []
        self.closed = False

    async def acquire(self, *, timeout=None):
        self.timeouts.append(timeout)
        if self.acquire_error is not None:
            raise self.acquire_error
        self.acquired += 1
        return self.conn

    async def release(self, conn):
        self.released += 1

    async def close(self):
        self.closed = True


def make_batches(*sheet_names):
    return [
        Batch(batch=f"B{i}", sheet_name=name, material_master="A572-50", qty=i)
        for i, name in enumerate(sheet_names, start=1)
    ]


def nest_row(program="P-100", sheet_name="S1", sheet_qty=4, material_master="A572-50"):
    return {
        "program": program,
        "repeat_id": 1,
        "machine": "Gemini",
        "cutting_time": 12.5,
        "sheet_name": sheet_name,
        "material_master": material_master,
        "sheet_qty": sheet_qty,
    }


def run(coro):
    return asyncio.run(coro)
