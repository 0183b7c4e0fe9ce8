from __future__ import annotations

from pathlib import Path

from alembic import command
from alembic.config import Config

from memberhub.infra.db import DATABASE_URL

ROOT = Path(__file__).resolve().parents[2]


def build_alembic_config() -> Config:
    config = Config(str(ROOT / "alembic.ini"))
    config.set_main_option("script_location", str(ROOT / "infra" / "migrations"))
    config.set_main_option("sqlalchemy.url", DATABASE_URL)
    return config


def run_upgrade_head() -> None:
    command.upgrade(build_alembic_config(), "head")


if __name__ == "__main__":
    run_upgrade_head()
