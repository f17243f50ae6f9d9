"""
Address-bar codec tests

Tests:
  1. Defaults and fail-safe decoding of malformed fields
  2. First-page rule on every filter write
  3. Canonical key order and preservation of unknown keys
  4. Request parameters for the listing service
"""
import pytest

from order_desk.query_state import (
    FilterState,
    decode,
    encode,
    make_location,
    normalize_location,
    request_params,
    split_location,
)


# ─── Test 1: Decoding ──────────────────────────────────────────────────────────
def test_empty_query_decodes_to_defaults():
    assert decode("") == FilterState(q="", status="all", dining="all", range="7d", page=1, per_page=10)


def test_decode_reads_every_recognized_key():
    state = decode("q=budi&status=PAID&dining=TAKE_AWAY&range=30d&page=3&perPage=20")
    assert state == FilterState(q="budi", status="PAID", dining="TAKE_AWAY", range="30d", page=3, per_page=20)


def test_leading_question_mark_and_plus_encoded_spaces():
    assert decode("?q=nasi+goreng").q == "nasi goreng"


@pytest.mark.parametrize("raw", ["abc", "", "1.5", "-2", "0", "2x"])
def test_malformed_page_falls_back_to_first_page(raw):
    assert decode(f"page={raw}").page == 1


@pytest.mark.parametrize("raw", ["abc", "", "0", "-10"])
def test_malformed_per_page_falls_back_to_default(raw):
    assert decode(f"perPage={raw}").per_page == 10


def test_per_page_is_capped():
    assert decode("perPage=5000").per_page == 100


def test_unknown_enum_values_fall_back_to_defaults():
    state = decode("status=SHIPPED&dining=DRIVE_THRU&range=90d")
    assert (state.status, state.dining, state.range) == ("all", "all", "7d")


def test_first_occurrence_of_a_key_wins():
    assert decode("status=PAID&status=OPEN").status == "PAID"


# ─── Test 2: First-page rule ───────────────────────────────────────────────────
@pytest.mark.parametrize(
    "key,value",
    [("q", "budi"), ("status", "OPEN"), ("dining", "DINE_IN"), ("range", "today")],
)
def test_filter_change_resets_page(key, value):
    query = encode("status=PAID&range=30d&page=4", key, value)
    assert decode(query).page == 1


def test_pagination_keys_do_not_reset_page():
    assert decode(encode("page=4", "perPage", "20")).page == 4
    assert decode(encode("page=4", "page", "5")).page == 5


def test_clearing_search_removes_key_and_resets_page():
    query = encode("q=budi&page=3", "q", "")
    assert query == "page=1"
    assert decode(query).q == ""


# ─── Test 3: Canonical order ───────────────────────────────────────────────────
def test_scenario_filters_then_dining_change():
    query = ""
    query = encode(query, "status", "PAID")
    query = encode(query, "range", "30d")
    query = encode(query, "page", "2")
    assert "status=PAID&range=30d&page=2" in query

    query = encode(query, "dining", "DINE_IN")
    assert query == "status=PAID&dining=DINE_IN&range=30d&page=1"


def test_unknown_keys_are_kept_after_known_ones():
    assert encode("utm=mail&status=OPEN", "range", "all") == "status=OPEN&range=all&page=1&utm=mail"


def test_values_are_url_encoded():
    assert encode("", "q", "nasi goreng&teh") == "q=nasi+goreng%26teh&page=1"


def test_encoding_never_raises_on_garbage():
    assert encode("page=abc&perPage=%%%", "status", "OPEN").startswith("status=OPEN")


# ─── Locations ─────────────────────────────────────────────────────────────────
def test_split_and_make_location():
    assert split_location("/admin/pesanan?status=PAID") == ("/admin/pesanan", "status=PAID")
    assert make_location("") == "/admin/pesanan"
    assert make_location("page=2") == "/admin/pesanan?page=2"


@pytest.mark.parametrize(
    "raw,expected",
    [
        ("", "/admin/pesanan"),
        ("  /admin/pesanan?page=2  ", "/admin/pesanan?page=2"),
        ("/elsewhere?status=OPEN", "/admin/pesanan?status=OPEN"),
        ("?range=today", "/admin/pesanan?range=today"),
        ("status=PAID", "/admin/pesanan?status=PAID"),
        ("/admin/pesanan", "/admin/pesanan"),
        ("/admin/pesanan?page=2#top", "/admin/pesanan?page=2"),
    ],
)
def test_normalize_location(raw, expected):
    assert normalize_location(raw) == expected


# ─── Test 4: Request parameters ────────────────────────────────────────────────
def test_default_state_omits_blank_and_all_filters():
    assert request_params(FilterState()) == {"range": "7d", "page": "1", "perPage": "10"}


def test_set_filters_are_all_sent():
    state = FilterState(q="budi", status="PAID", dining="DINE_IN", range="30d", page=2, per_page=20)
    assert request_params(state) == {
        "q": "budi",
        "status": "PAID",
        "dining": "DINE_IN",
        "range": "30d",
        "page": "2",
        "perPage": "20",
    }


def test_no_parameter_is_ever_an_empty_string():
    for query in ["", "q=", "q=+++", "status=&dining=&range=", "page=&perPage="]:
        params = request_params(decode(query))
        assert all(value != "" for value in params.values()), params


def test_range_all_is_sent_explicitly():
    params = request_params(decode("status=all&dining=all&range=all"))
    assert params == {"range": "all", "page": "1", "perPage": "10"}
