"""The Alembic migration builds the same schema the models describe."""

from pathlib import Path

from alembic import command
from alembic.config import Config
from sqlalchemy import create_engine, inspect

from cerebero.shared.models import Base


ROOT = Path(__file__).resolve().parent.parent


def _alembic_config(db_path: Path) -> Config:
    config = Config(str(ROOT / "alembic.ini"))
    config.set_main_option("script_location", str(ROOT / "cerebero" / "shared" / "migrations"))
    config.set_main_option("sqlalchemy.url", f"sqlite+aiosqlite:///{db_path}")
    return config


def _tables(db_path: Path) -> dict[str, set[str]]:
    engine = create_engine(f"sqlite:///{db_path}")
    try:
        inspector = inspect(engine)
        return {
            table: {column["name"] for column in inspector.get_columns(table)}
            for table in inspector.get_table_names()
            if table != "alembic_version"
        }
    finally:
        engine.dispose()


def test_upgrade_matches_models(tmp_path):
    db_path = tmp_path / "cerebero.db"
    command.upgrade(_alembic_config(db_path), "head")

    tables = _tables(db_path)
    expected = {
        table.name: {column.name for column in table.columns}
        for table in Base.metadata.sorted_tables
    }
    assert tables == expected


def test_downgrade_drops_everything(tmp_path):
    db_path = tmp_path / "cerebero.db"
    config = _alembic_config(db_path)
    command.upgrade(config, "head")
    command.downgrade(config, "base")

    assert _tables(db_path) == {}
