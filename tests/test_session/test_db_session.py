from __future__ import annotations

from unittest.mock import Mock, patch

from sqlalchemy import text
from sqlalchemy.orm import Session
from sqlalchemy.pool import StaticPool

from bookstore.db.session import SessionLocal, build_engine, engine, get_db


class TestDatabaseSession:
    """Test database session functionality."""

    def test_session_local_configuration(self):
        assert hasattr(SessionLocal, "__call__")
        assert SessionLocal.kw.get("autocommit") is False
        assert SessionLocal.kw.get("autoflush") is False

    def test_engine_configuration(self):
        assert engine is not None
        assert engine.url is not None

    def test_in_memory_sqlite_shares_one_connection(self):
        memory_engine = build_engine("sqlite+pysqlite:///:memory:")

        assert isinstance(memory_engine.pool, StaticPool)
        with memory_engine.begin() as conn:
            conn.execute(text("CREATE TABLE shelf (id INTEGER PRIMARY KEY)"))
        with memory_engine.connect() as conn:
            assert conn.execute(text("SELECT count(*) FROM shelf")).scalar() == 0

    def test_file_sqlite_uses_regular_pool(self, tmp_path):
        file_engine = build_engine(f"sqlite:///{tmp_path / 'store.db'}")

        assert not isinstance(file_engine.pool, StaticPool)
        assert file_engine.dialect.name == "sqlite"

    def test_postgres_url(self):
        pg_engine = build_engine("postgresql+psycopg://user:pw@localhost:5432/bookstore")

        assert pg_engine.dialect.name == "postgresql"
        assert not isinstance(pg_engine.pool, StaticPool)

    @patch("bookstore.db.session.SessionLocal")
    def test_get_db_yields_and_closes(self, mock_session_local):
        mock_db = Mock(spec=Session)
        mock_session_local.return_value = mock_db

        generator = get_db()
        session = next(generator)

        mock_session_local.assert_called_once()
        assert session == mock_db
        mock_db.close.assert_not_called()

        try:
            next(generator)
        except StopIteration:
            pass

        mock_db.close.assert_called_once()

    @patch("bookstore.db.session.SessionLocal")
    def test_get_db_closes_on_error(self, mock_session_local):
        mock_db = Mock(spec=Session)
        mock_session_local.return_value = mock_db

        generator = get_db()
        next(generator)

        try:
            generator.throw(RuntimeError("request failed"))
        except RuntimeError:
            pass

        mock_db.close.assert_called_once()
