"""
Identity provider calls: authorize URL for the browser redirect and the server-to-server code exchange.
The client secret is only ever sent from here.
"""
import logging
from urllib.parse import urlencode

import httpx

from oauth_broker.config import BrokerConfig

logger = logging.getLogger(__name__)


class TokenExchangeError(Exception):
    """Token endpoint unreachable or returned something other than a JSON object."""

    def __init__(self, message: str, status_code: int = 502):
        super().__init__(message)
        self.message = message
        self.status_code = status_code


def build_authorize_url(
    *,
    authorize_url: str,
    client_id: str,
    redirect_uri: str,
    scope: str,
    state: str,
) -> str:
    """Provider authorize URL with client_id, redirect_uri, scope and state."""
    params = {
        "client_id": client_id,
        "redirect_uri": redirect_uri,
        "scope": scope,
        "state": state,
    }
    return f"{authorize_url}?{urlencode(params)}"


def exchange_code(config: BrokerConfig, code: str, redirect_uri: str) -> dict:
    """
    POST the authorization code to the token endpoint. No retries.
    Returns the decoded JSON object, which may itself carry an "error" field.
    Raises TokenExchangeError on transport failure, a 5xx status, or a non-object body.
    """
    try:
        r = httpx.post(
            config.token_url,
            json={
                "client_id": config.client_id,
                "client_secret": config.client_secret,
                "code": code,
                "redirect_uri": redirect_uri,
            },
            headers={"Accept": "application/json"},
            timeout=config.token_timeout,
        )
    except httpx.HTTPError as e:
        logger.error("Token endpoint request failed: %s", type(e).__name__)
        raise TokenExchangeError(f"Could not reach {config.provider_name}") from e

    if r.status_code >= 500:
        logger.error("Token endpoint returned status %s", r.status_code)
        raise TokenExchangeError(f"Unexpected response from {config.provider_name}")

    try:
        data = r.json()
    except ValueError as e:
        logger.error("Token endpoint returned non-JSON body (status %s)", r.status_code)
        raise TokenExchangeError(f"Unexpected response from {config.provider_name}") from e
    if not isinstance(data, dict):
        logger.error("Token endpoint returned %s instead of an object", type(data).__name__)
        raise TokenExchangeError(f"Unexpected response from {config.provider_name}")
    return data
