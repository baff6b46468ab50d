"""
Cookie codec for the CSRF state cookie.
Encodes Set-Cookie values and decodes raw Cookie headers; no framework cookie jar involved.
"""
from dataclasses import dataclass
from urllib.parse import quote, unquote

from oauth_broker.config import STATE_COOKIE_MAX_AGE, STATE_COOKIE_NAME, BrokerConfig


@dataclass(frozen=True)
class CookieOptions:
    http_only: bool = True
    secure: bool = False
    same_site: str | None = "Lax"
    max_age: int | None = None
    path: str | None = "/"
    domain: str | None = None


def build_set_cookie(name: str, value: str, options: CookieOptions) -> str:
    """Encode one Set-Cookie header value. The value is percent-encoded."""
    parts = [f"{name}={quote(value, safe='')}"]
    if options.http_only:
        parts.append("HttpOnly")
    if options.secure:
        parts.append("Secure")
    if options.same_site:
        parts.append(f"SameSite={options.same_site}")
    if options.max_age is not None:
        parts.append(f"Max-Age={options.max_age}")
    if options.path:
        parts.append(f"Path={options.path}")
    if options.domain:
        parts.append(f"Domain={options.domain}")
    return "; ".join(parts)


def parse_cookie_header(header: str | None) -> dict[str, str]:
    """
    Decode a raw Cookie header into name -> value.
    Pairs are split on the first "=", so values may contain "=". A name with no value maps to "".
    """
    cookies: dict[str, str] = {}
    if not header:
        return cookies
    for pair in header.split(";"):
        pair = pair.strip()
        if not pair:
            continue
        name, _, value = pair.partition("=")
        name = name.strip()
        if not name:
            continue
        cookies[name] = unquote(value.strip())
    return cookies


def extract_state(cookies: dict[str, str]) -> str | None:
    """CSRF state from the decoded cookies, or None when absent or empty."""
    return cookies.get(STATE_COOKIE_NAME) or None


def cookie_options(config: BrokerConfig) -> CookieOptions:
    return CookieOptions(
        http_only=True,
        secure=config.production,
        same_site="Lax",
        max_age=STATE_COOKIE_MAX_AGE,
        path="/",
        domain=config.cookie_domain,
    )


def expired_cookie_options(config: BrokerConfig) -> CookieOptions:
    """Same attributes as the issuing cookie with Max-Age=0 so the browser drops it."""
    return CookieOptions(
        http_only=True,
        secure=config.production,
        same_site="Lax",
        max_age=0,
        path="/",
        domain=config.cookie_domain,
    )


def state_cookie(config: BrokerConfig, state: str) -> str:
    return build_set_cookie(STATE_COOKIE_NAME, state, cookie_options(config))


def clear_state_cookie(config: BrokerConfig) -> str:
    return build_set_cookie(STATE_COOKIE_NAME, "", expired_cookie_options(config))
