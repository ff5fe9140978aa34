"""Tests for the relational tag index on SQLite (aiosqlite)."""

from unittest.mock import MagicMock

import pytest

pytest.importorskip("sqlalchemy")
pytest.importorskip("aiosqlite")

from sqlalchemy import text

from cachetags import InvalidTableNameError
from cachetags.backends.sql import SqlTagIndex, quote_identifier
from tests.backends.contract import TagIndexContract


@pytest.fixture
def sqlite_url(tmp_path) -> str:
    return f"sqlite+aiosqlite:///{tmp_path / 'tags.db'}"


@pytest.fixture
async def sql_index(sqlite_url: str):
    """Create a SqlTagIndex over a fresh SQLite file."""
    index = SqlTagIndex.from_url(sqlite_url)
    await index.create_table()
    yield index
    await index.disconnect()


class TestSqlTagIndex(TagIndexContract):
    """Contract and SQL-specific tests for SqlTagIndex."""

    @pytest.fixture
    def index(self, sql_index: SqlTagIndex) -> SqlTagIndex:
        return sql_index

    async def test_counts_are_rows(self, index: SqlTagIndex) -> None:
        await index.store("A", ["x", "y"])
        await index.store("B", ["x"])
        await index.store("C", ["z"])

        assert await index.delete_tags(["x"]) == 2
        assert await index.delete_queries(["A", "C"]) == 2
        assert await index.truncate() == 0

    async def test_truncate_counts_rows(self, index: SqlTagIndex) -> None:
        await index.store("A", ["x", "y"])
        await index.store("B", ["x"])
        assert await index.truncate() == 3

    async def test_store_does_not_duplicate_rows(self, index: SqlTagIndex) -> None:
        await index.store("A", ["x", "y"])
        await index.store("A", ["y", "z"])

        async with index._engine.connect() as conn:
            result = await conn.execute(
                text("SELECT query_id, cache_tag FROM query_cache_tags")
            )
            rows = sorted(tuple(row) for row in result)

        assert rows == [("A", "x"), ("A", "y"), ("A", "z")]

    async def test_values_are_bound_not_interpolated(self, index: SqlTagIndex) -> None:
        hostile = "x');DELETE/**/FROM/**/query_cache_tags;--"
        await index.store("safe", ["kept"])
        await index.store("q'1", [hostile])

        assert await index.resolve([hostile]) == ["q'1"]
        assert await index.resolve(["kept"]) == ["safe"]
        assert await index.delete_queries(["q'1"]) == 1

    async def test_create_table_is_idempotent(self, index: SqlTagIndex) -> None:
        await index.store("A", ["x"])
        await index.create_table()
        assert await index.resolve(["x"]) == ["A"]

    async def test_schema_qualified_table(self, sqlite_url: str) -> None:
        index = SqlTagIndex.from_url(sqlite_url, table="main.other_tags")
        try:
            await index.create_table()
            await index.store("A", ["x"])
            assert await index.resolve(["x"]) == ["A"]
        finally:
            await index.disconnect()


class TestEmptyInputsSkipTheDatabase:
    """Empty inputs must not open a connection."""

    @pytest.fixture
    def engine(self) -> MagicMock:
        return MagicMock()

    async def test_no_engine_calls(self, engine: MagicMock) -> None:
        index = SqlTagIndex(engine)

        await index.store("q1", [])
        assert await index.resolve([]) == []
        assert await index.delete_tags([]) == 0
        assert await index.delete_queries([]) == 0

        engine.begin.assert_not_called()
        engine.connect.assert_not_called()


class TestQuoteIdentifier:
    @pytest.mark.parametrize(
        ("name", "quoted"),
        [
            ("query_cache_tags", '"query_cache_tags"'),
            ("public.query_cache_tags", '"public"."query_cache_tags"'),
            ("_tags$2", '"_tags$2"'),
            ("$tags", '"$tags"'),
        ],
    )
    def test_valid_names_are_quoted(self, name: str, quoted: str) -> None:
        assert quote_identifier(name) == quoted

    @pytest.mark.parametrize(
        "name",
        [
            "",
            "1tags",
            "tags; DROP TABLE users",
            'tags"',
            "a.b.c",
            "schema.",
            ".tags",
            "tags-name",
            "tags name",
            "tags\n",
            "public.tags\n",
        ],
    )
    def test_invalid_names_are_rejected(self, name: str) -> None:
        with pytest.raises(InvalidTableNameError):
            quote_identifier(name)

    def test_index_rejects_invalid_table_at_construction(self) -> None:
        with pytest.raises(InvalidTableNameError):
            SqlTagIndex(MagicMock(), table="bad table")
