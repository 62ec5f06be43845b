import logging

import pytest

from core.errors import DatabaseError, NotFound
from helpers import nest_row, run
from nests import service


def test_resolve_nest(db, conn):
    conn.queue("fetchrow", nest_row(program="P-100", sheet_name="S1"))
    nest = run(service.resolve_nest("P-100", db))

    assert nest.program == "P-100"
    assert nest.sheet.sheet_name == "S1"
    assert nest.sheet.material_master == "A572-50"
    method, sql, args = conn.calls[0]
    assert method == "fetchrow"
    assert args == ("P-100",)
    assert "WHERE Program.ProgramName = $1" in sql


def test_resolve_sheet_without_stock_record(db, conn):
    conn.queue("fetchrow", nest_row(sheet_name="S1", sheet_qty=None, material_master=None))
    nest = run(service.resolve_nest("P-100", db))

    assert nest.sheet.sheet_name == "S1"
    assert nest.sheet.material_master is None
    assert nest.sheet.qty is None
    assert not nest.sheet.is_singleton
    _, sql, _ = conn.calls[0]
    assert "LEFT JOIN Stock" in sql


def test_resolve_unknown_program_is_not_found(db):
    with pytest.raises(NotFound):
        run(service.resolve_nest("does-not-exist", db))


def test_resolve_undecodable_row_is_database_error(db, conn):
    conn.queue("fetchrow", {"program": "P-100"})
    with pytest.raises(DatabaseError):
        run(service.resolve_nest("P-100", db))


def test_batches_for_program_filters_by_sheet_in_cache_order(db, conn, cache, batch_loader):
    conn.queue("fetchrow", nest_row(sheet_name="S1"))
    batches = run(service.batches_for_program("P-100", db=db, cache=cache))

    assert [b.batch for b in batches] == ["B1", "B3"]
    assert all(b.sheet_name == "S1" for b in batches)
    assert len(batch_loader.calls) == 1


def test_batches_for_program_no_matching_sheet(db, conn, cache):
    conn.queue("fetchrow", nest_row(sheet_name="S9"))
    assert run(service.batches_for_program("P-100", db=db, cache=cache)) == []


def test_batches_for_unknown_program_propagates_not_found(db, cache):
    with pytest.raises(NotFound):
        run(service.batches_for_program("does-not-exist", db=db, cache=cache))


def test_singleton_sheet_is_flagged_and_uses_sheet_match(db, conn, cache, caplog):
    conn.queue("fetchrow", nest_row(sheet_name="S2", sheet_qty=1))
    with caplog.at_level(logging.WARNING, logger="nests.service"):
        batches = run(service.batches_for_program("P-200", db=db, cache=cache))

    assert [b.batch for b in batches] == ["B2"]
    assert any("singleton_sheet_unhandled" in r.getMessage() for r in caplog.records)
