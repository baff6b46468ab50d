"""Tests for GET/OPTIONS /oauth/login."""
import logging
from urllib.parse import parse_qs, urlparse

from oauth_broker.config import get_config
from oauth_broker.cookies import parse_cookie_header
from oauth_broker.main import app


def _state_cookie_value(response) -> str:
    raw = response.headers["set-cookie"]
    return parse_cookie_header(raw.split(";", 1)[0])["oauth_state"]


def test_health(client):
    r = client.get("/health")
    assert r.status_code == 200
    assert r.json() == {"status": "ok", "service": "oauth_broker", "environment": "development"}


def test_index_lists_endpoints(client):
    r = client.get("/")
    assert r.status_code == 200
    assert any("/oauth/login" in e for e in r.json()["endpoints"])


def test_login_redirects_to_provider_with_state_cookie(client):
    r = client.get("/oauth/login", params={"project": "create"}, follow_redirects=False)
    assert r.status_code == 302
    location = urlparse(r.headers["location"])
    assert f"{location.scheme}://{location.netloc}{location.path}" == "https://github.com/login/oauth/authorize"
    params = parse_qs(location.query)
    assert params["client_id"] == ["test-client-id"]
    assert params["redirect_uri"] == ["http://localhost:3000/oauth/callback"]
    assert params["scope"] == ["repo,user"]
    state = params["state"][0]
    random_part, _, project = state.partition(":")
    assert project == "create"
    assert len(random_part) == 32
    int(random_part, 16)
    assert _state_cookie_value(r) == state


def test_login_cookie_attributes(client):
    r = client.get("/oauth/login", follow_redirects=False)
    cookie = r.headers["set-cookie"]
    assert "HttpOnly" in cookie
    assert "SameSite=Lax" in cookie
    assert "Max-Age=600" in cookie
    assert "Path=/" in cookie
    assert "Secure" not in cookie


def test_login_defaults_project(client):
    r = client.get("/oauth/login", follow_redirects=False)
    state = parse_qs(urlparse(r.headers["location"]).query)["state"][0]
    assert state.endswith(":create")


def test_login_fresh_state_each_time(client):
    first = client.get("/oauth/login", follow_redirects=False)
    second = client.get("/oauth/login", follow_redirects=False)
    assert _state_cookie_value(first) != _state_cookie_value(second)


def test_login_unknown_project_warns_but_redirects(client, caplog):
    with caplog.at_level(logging.WARNING, logger="oauth_broker.login"):
        r = client.get("/oauth/login", params={"project": "unregistered"}, follow_redirects=False)
    assert r.status_code == 302
    assert _state_cookie_value(r).endswith(":unregistered")
    assert "Unknown project: unregistered" in caplog.text


def test_login_malformed_project_uses_default(client):
    r = client.get("/oauth/login", params={"project": "evil:project"}, follow_redirects=False)
    assert r.status_code == 302
    state = _state_cookie_value(r)
    assert state.count(":") == 1
    assert state.endswith(":create")


def test_login_qualified_redirect_uri(client, config_factory):
    app.dependency_overrides[get_config] = lambda: config_factory(qualify_redirect_uri=True)
    r = client.get("/oauth/login", params={"project": "prompts"}, follow_redirects=False)
    params = parse_qs(urlparse(r.headers["location"]).query)
    assert params["redirect_uri"] == ["http://localhost:3000/oauth/callback?project=prompts"]


def test_login_cors_headers_for_allowed_origin(client):
    r = client.get("/oauth/login", headers={"Origin": "http://localhost:5174"}, follow_redirects=False)
    assert r.headers["access-control-allow-origin"] == "http://localhost:5174"
    assert r.headers["access-control-allow-credentials"] == "true"


def test_login_cors_headers_for_unlisted_origin(client):
    r = client.get("/oauth/login", headers={"Origin": "https://evil.example"}, follow_redirects=False)
    assert r.headers["access-control-allow-origin"] == "http://localhost:5173"


def test_login_preflight(client):
    r = client.options("/oauth/login", headers={"Origin": "http://localhost:5173"})
    assert r.status_code == 200
    assert r.headers["access-control-allow-origin"] == "http://localhost:5173"
    assert "set-cookie" not in r.headers
    assert "location" not in r.headers


def test_login_rejects_other_methods(client):
    r = client.post("/oauth/login")
    assert r.status_code == 405
    assert r.json() == {"error": "Method not allowed"}
    assert "access-control-allow-origin" in r.headers


def test_login_config_error_lists_missing_items(client, config_factory):
    app.dependency_overrides[get_config] = lambda: config_factory(client_id=None, client_secret=None)
    r = client.get("/oauth/login", follow_redirects=False)
    assert r.status_code == 500
    body = r.json()
    assert body["error"] == "Server configuration error"
    assert body["details"] == ["Missing GitHub Client ID", "Missing GitHub Client Secret"]
    assert "set-cookie" not in r.headers


def test_login_unexpected_error_hides_detail(client, monkeypatch):
    def boom(*args, **kwargs):
        raise RuntimeError("secret internals")

    monkeypatch.setattr("oauth_broker.login.generate_state", boom)
    r = client.get("/oauth/login", follow_redirects=False)
    assert r.status_code == 500
    assert r.json() == {"error": "Internal server error"}
    assert "secret internals" not in r.text
