from pathlib import Path

from sqlalchemy import create_engine, text

from ibdp_coach.migrations import run_migrations


def _columns(conn, table):
    return {row[1] for row in conn.execute(text(f"PRAGMA table_info({table})")).fetchall()}


def test_run_migrations_upgrades_old_schema(tmp_path: Path) -> None:
    db_path = tmp_path / "test.db"
    engine = create_engine(f"sqlite:///{db_path}")
    with engine.begin() as conn:
        conn.execute(text("CREATE TABLE assignments (id INTEGER PRIMARY KEY, title TEXT)"))
        conn.execute(text("CREATE TABLE users (id INTEGER PRIMARY KEY, username TEXT)"))

    applied = run_migrations(engine)

    assert applied == ["0001", "0002"]
    assert (tmp_path / "test.db.bak").exists()
    with engine.begin() as conn:
        assert "no_ghostwriting_accepted" in _columns(conn, "assignments")
        assert {"school_name", "consent_given"} <= _columns(conn, "users")
        versions = conn.execute(text("SELECT version FROM schema_migrations")).fetchall()
        assert len(versions) == 2


def test_run_migrations_is_idempotent(tmp_path: Path) -> None:
    engine = create_engine(f"sqlite:///{tmp_path / 'test.db'}")
    with engine.begin() as conn:
        conn.execute(
            text("CREATE TABLE assignments (id INTEGER PRIMARY KEY, no_ghostwriting_accepted BOOLEAN)")
        )
        conn.execute(text("CREATE TABLE users (id INTEGER PRIMARY KEY)"))

    # 已存在的列被跳过，版本仍被记录
    assert run_migrations(engine) == ["0001", "0002"]
    assert run_migrations(engine) == []


def test_custom_migrations_dir(tmp_path: Path) -> None:
    migrations = tmp_path / "sql"
    migrations.mkdir()
    (migrations / "0001_create_notes.sql").write_text(
        "CREATE TABLE notes (id INTEGER PRIMARY KEY);\nCREATE TABLE notes (id INTEGER PRIMARY KEY);",
        encoding="utf-8",
    )
    engine = create_engine(f"sqlite:///{tmp_path / 'notes.db'}")

    assert run_migrations(engine, migrations) == ["0001"]
