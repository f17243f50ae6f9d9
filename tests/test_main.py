"""Command line parsing and start-location restore."""
from order_desk import config
from order_desk.main import parse_args, resolve_start_location
from order_desk.persistence import bootstrap_schema, save_location


def test_defaults():
    args = parse_args([])
    assert args.api_url == config.API_BASE_URL
    assert args.location is None
    assert args.forget is False


def test_explicit_location_wins(tmp_path, monkeypatch):
    monkeypatch.setattr(config, "DB_PATH", str(tmp_path / "desk.db"))
    bootstrap_schema()
    save_location("/admin/pesanan?status=PAID")
    args = parse_args(["--location", "/admin/pesanan?status=OPEN"])
    assert resolve_start_location(args) == "/admin/pesanan?status=OPEN"


def test_last_location_is_restored(tmp_path, monkeypatch):
    monkeypatch.setattr(config, "DB_PATH", str(tmp_path / "desk.db"))
    bootstrap_schema()
    save_location("/admin/pesanan?status=PAID")
    assert resolve_start_location(parse_args([])) == "/admin/pesanan?status=PAID"
    assert resolve_start_location(parse_args(["--forget"])) == config.PAGE_PATH


def test_fresh_install_starts_on_orders_page(tmp_path, monkeypatch):
    monkeypatch.setattr(config, "DB_PATH", str(tmp_path / "nested" / "desk.db"))
    assert resolve_start_location(parse_args([])) == config.PAGE_PATH
