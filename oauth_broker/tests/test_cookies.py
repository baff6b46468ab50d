"""Tests for the state cookie codec."""
from oauth_broker.config import STATE_COOKIE_NAME
from oauth_broker.cookies import (
    CookieOptions,
    build_set_cookie,
    clear_state_cookie,
    extract_state,
    parse_cookie_header,
    state_cookie,
)


def test_build_set_cookie_all_attributes():
    options = CookieOptions(http_only=True, secure=True, same_site="Lax", max_age=600, path="/", domain="example.com")
    header = build_set_cookie("oauth_state", "abc:create", options)
    assert header == "oauth_state=abc%3Acreate; HttpOnly; Secure; SameSite=Lax; Max-Age=600; Path=/; Domain=example.com"


def test_build_set_cookie_omits_unset_attributes():
    options = CookieOptions(http_only=False, secure=False, same_site=None, max_age=None, path=None)
    assert build_set_cookie("a", "b", options) == "a=b"


def test_build_set_cookie_emits_zero_max_age():
    header = build_set_cookie("a", "", CookieOptions(max_age=0))
    assert "Max-Age=0" in header


def test_parse_cookie_header_decodes_values():
    cookies = parse_cookie_header("oauth_state=abc%3Acreate; theme=dark")
    assert cookies == {"oauth_state": "abc:create", "theme": "dark"}


def test_parse_cookie_header_splits_on_first_equals():
    assert parse_cookie_header("token=a=b==") == {"token": "a=b=="}


def test_parse_cookie_header_tolerates_empty_and_valueless():
    assert parse_cookie_header(None) == {}
    assert parse_cookie_header("") == {}
    assert parse_cookie_header(" ; ;") == {}
    assert parse_cookie_header("flag; other=1") == {"flag": "", "other": "1"}


def test_extract_state_absent_or_empty():
    assert extract_state({}) is None
    assert extract_state({STATE_COOKIE_NAME: ""}) is None
    assert extract_state({"other": "x"}) is None
    assert extract_state({STATE_COOKIE_NAME: "abc:create"}) == "abc:create"


def test_state_cookie_secure_only_in_production(config_factory):
    dev = state_cookie(config_factory(production=False), "abc:create")
    prod = state_cookie(config_factory(production=True), "abc:create")
    assert "Secure" not in dev
    assert "; Secure" in prod
    for header in (dev, prod):
        assert "HttpOnly" in header
        assert "SameSite=Lax" in header
        assert "Max-Age=600" in header
        assert "Path=/" in header


def test_state_cookie_roundtrips_through_parser(config):
    header = state_cookie(config, "0f0f:prompts")
    name_value = header.split(";", 1)[0]
    assert extract_state(parse_cookie_header(name_value)) == "0f0f:prompts"


def test_clear_state_cookie_expires_immediately(config):
    header = clear_state_cookie(config)
    assert header.startswith(f"{STATE_COOKIE_NAME}=;")
    assert "Max-Age=0" in header
