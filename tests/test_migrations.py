"""Run the Alembic migrations against a temporary SQLite file."""

import argparse
import tempfile
import unittest
from pathlib import Path

from alembic import command
from alembic.config import Config
from sqlalchemy import create_engine, inspect

from crudkit.core.security import verify_password
from crudkit.repositories import build_user_repository
from helpers import make_settings

PROJECT_ROOT = Path(__file__).resolve().parents[1]


class TestMigrations(unittest.TestCase):
    def setUp(self) -> None:
        tmp = tempfile.TemporaryDirectory()
        self.addCleanup(tmp.cleanup)
        self.url = f"sqlite:///{Path(tmp.name) / 'migrated.db'}"
        self.config = Config(str(PROJECT_ROOT / "alembic.ini"))
        self.config.set_main_option("script_location", str(PROJECT_ROOT / "alembic"))
        # Same as `alembic -x url=...` on the command line.
        self.config.cmd_opts = argparse.Namespace(x=[f"url={self.url}"])

    def _tables(self) -> set[str]:
        engine = create_engine(self.url)
        try:
            return set(inspect(engine).get_table_names())
        finally:
            engine.dispose()

    def test_upgrade_seeds_accounts_that_can_log_in(self) -> None:
        command.upgrade(self.config, "head")
        self.assertIn("users", self._tables())

        repository = build_user_repository(make_settings(DATABASE_URL=self.url))
        self.addCleanup(repository.close)
        for email in ("admin@admin.com", "test@admin.com"):
            user = repository.find_by_email(email)
            self.assertIsNotNone(user)
            self.assertTrue(verify_password("123456", user.password))
            self.assertIsNotNone(user.created_at)

    def test_downgrade_drops_users(self) -> None:
        command.upgrade(self.config, "head")
        command.downgrade(self.config, "base")
        self.assertNotIn("users", self._tables())


if __name__ == "__main__":
    unittest.main()
