"""
Narrow request/response values the login and callback steps operate on.
The FastAPI app in main.py translates to and from these; nothing here imports a web framework.
"""
import json
from dataclasses import dataclass, field


@dataclass(frozen=True)
class BrokerRequest:
    method: str
    path: str
    query: dict[str, str] = field(default_factory=dict)
    cookies: dict[str, str] = field(default_factory=dict)
    # Lower-cased header names
    headers: dict[str, str] = field(default_factory=dict)

    @property
    def origin(self) -> str | None:
        return self.headers.get("origin") or None


@dataclass
class BrokerResponse:
    status_code: int
    headers: dict[str, str] = field(default_factory=dict)
    # Set-Cookie header values
    cookies: list[str] = field(default_factory=list)
    body: str = ""
    media_type: str | None = None


def json_response(status_code: int, payload: dict, headers: dict[str, str] | None = None) -> BrokerResponse:
    return BrokerResponse(
        status_code=status_code,
        headers=dict(headers or {}),
        body=json.dumps(payload),
        media_type="application/json",
    )


def html_response(status_code: int, body: str, headers: dict[str, str] | None = None) -> BrokerResponse:
    return BrokerResponse(
        status_code=status_code,
        headers=dict(headers or {}),
        body=body,
        media_type="text/html",
    )
