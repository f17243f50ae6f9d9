"""Last-location memory stored in SQLite."""
import pytest

from order_desk import config
from order_desk.persistence import bootstrap_schema, load_last_location, save_location


@pytest.fixture(autouse=True)
def temp_db(tmp_path, monkeypatch):
    monkeypatch.setattr(config, "DB_PATH", str(tmp_path / "state" / "desk.db"))
    bootstrap_schema()


def test_empty_history():
    assert load_last_location() is None


def test_last_saved_location_wins():
    save_location("/admin/pesanan?status=OPEN")
    save_location("/admin/pesanan?status=PAID&page=2")
    assert load_last_location() == "/admin/pesanan?status=PAID&page=2"


def test_bootstrap_is_idempotent():
    save_location("/admin/pesanan")
    bootstrap_schema()
    assert load_last_location() == "/admin/pesanan"
