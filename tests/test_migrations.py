"""Tests for the Alembic schema, run against the in-memory SQLite test database."""

import unittest
from pathlib import Path

from alembic import command
from alembic.config import Config
from sqlalchemy import Text, inspect, text

from hacktrack.core.database import engine
from hacktrack.models import Base, Hackathon

ROOT = Path(__file__).resolve().parents[1]

FREE_FORM_FIELDS = (
    "name",
    "organizer",
    "location",
    "mode",
    "ppt_needed",
    "registered",
    "start_date",
    "end_date",
    "team_code",
    "link",
)


class TestInitialMigration(unittest.TestCase):
    def setUp(self) -> None:
        self.config = Config(str(ROOT / "alembic.ini"))
        self.config.set_main_option("script_location", str(ROOT / "alembic"))
        command.upgrade(self.config, "head")

    def tearDown(self) -> None:
        command.downgrade(self.config, "base")
        with engine.begin() as conn:
            conn.execute(text("DROP TABLE IF EXISTS alembic_version"))

    def test_creates_every_model_table(self) -> None:
        tables = set(inspect(engine).get_table_names())
        self.assertTrue(set(Base.metadata.tables).issubset(tables))

    def test_created_at_defaults_on_insert(self) -> None:
        with engine.begin() as conn:
            conn.execute(
                text(
                    "INSERT INTO users (username, password_hash, role, request_admin) "
                    "VALUES ('alice', 'hash', 'member', 0)"
                )
            )
            conn.execute(text("INSERT INTO hackathons (name) VALUES ('HackX')"))
            self.assertIsNotNone(conn.execute(text("SELECT created_at FROM users")).scalar_one())
            self.assertIsNotNone(
                conn.execute(text("SELECT created_at FROM hackathons")).scalar_one()
            )

    def test_free_form_fields_have_no_length_limit(self) -> None:
        columns = {c["name"]: c["type"] for c in inspect(engine).get_columns("hackathons")}
        for name in FREE_FORM_FIELDS:
            self.assertIsInstance(columns[name], Text, name)


class TestHackathonModel(unittest.TestCase):
    def test_free_form_fields_have_no_length_limit(self) -> None:
        for name in FREE_FORM_FIELDS:
            self.assertIsInstance(Hackathon.__table__.c[name].type, Text, name)


if __name__ == "__main__":
    unittest.main()
