"""
Callback processor (/oauth/callback).
Validates the CSRF state against the cookie, exchanges the code for an access token, and returns
a page that hands the token to the opener window of the project the login started from.
"""
import hmac
import logging

from oauth_broker.config import BrokerConfig
from oauth_broker.cookies import clear_state_cookie, extract_state
from oauth_broker.origins import cors_headers, resolve_frontend_origin, validate_config
from oauth_broker.pages import error_page, success_page
from oauth_broker.provider import TokenExchangeError, exchange_code
from oauth_broker.state import project_from_state, redact
from oauth_broker.web import BrokerRequest, BrokerResponse, html_response

logger = logging.getLogger(__name__)

NO_CACHE_HEADERS = {
    "Cache-Control": "no-store, no-cache, must-revalidate",
    "Pragma": "no-cache",
}


def _states_match(stored: str | None, provided: str) -> bool:
    if not stored:
        return False
    return hmac.compare_digest(stored.encode("utf-8"), provided.encode("utf-8"))


def process_callback(config: BrokerConfig, request: BrokerRequest) -> BrokerResponse:
    logger.info(
        "OAuth callback request received: params=%s has_cookies=%s",
        sorted(request.query),
        bool(request.cookies),
    )

    errors = validate_config(config)
    if errors:
        logger.error("Configuration validation failed: %s", errors)
        message = "Server configuration error: " + "; ".join(errors)
        return html_response(500, error_page(message))

    headers = cors_headers(config, request.origin)

    try:
        rejected = _reject(config, request, headers)
    except Exception:
        logger.exception("OAuth callback error")
        return _internal_error(headers)
    if rejected is not None:
        return rejected

    # State is consumed from here on, whatever the outcome
    try:
        response = _deliver(config, request, headers)
    except Exception:
        logger.exception("OAuth callback error")
        response = _internal_error(headers)
    response.cookies = [clear_state_cookie(config)]
    return response


def _internal_error(headers: dict[str, str]) -> BrokerResponse:
    return html_response(500, error_page("Internal server error"), {**headers, **NO_CACHE_HEADERS})


def _reject(config: BrokerConfig, request: BrokerRequest, headers: dict[str, str]) -> BrokerResponse | None:
    """Failure page for a provider error, missing parameters or a CSRF mismatch; None when the state checks out."""
    code = request.query.get("code")
    state = request.query.get("state")
    error = request.query.get("error")

    if error:
        description = request.query.get("error_description")
        logger.error("Provider returned error: %s", error)
        message = f"{config.provider_name} error: {error}"
        if description:
            message = f"{message} ({description})"
        return html_response(400, error_page(message), headers)

    if not code or not state:
        logger.error("Missing required parameters: has_code=%s has_state=%s", bool(code), bool(state))
        return html_response(400, error_page("Missing authorization code or state"), headers)

    stored_state = extract_state(request.cookies)
    if not _states_match(stored_state, state):
        logger.error(
            "State validation failed: stored=%s provided=%s",
            redact(stored_state),
            redact(state),
        )
        return html_response(400, error_page("Invalid state parameter - possible CSRF attack"), headers)
    return None


def _deliver(config: BrokerConfig, request: BrokerRequest, headers: dict[str, str]) -> BrokerResponse:
    code = request.query["code"]
    state = request.query["state"]

    project = project_from_state(state, config.default_project)
    frontend_origin = resolve_frontend_origin(config, project)
    redirect_uri = config.callback_url(project)
    logger.info("Exchanging code for token: project=%s frontend_origin=%s", project, frontend_origin)

    try:
        token_data = exchange_code(config, code, redirect_uri)
    except TokenExchangeError as e:
        return html_response(e.status_code, error_page(e.message), {**headers, **NO_CACHE_HEADERS})

    if token_data.get("error"):
        logger.error("Token exchange error: %s", token_data.get("error"))
        description = token_data.get("error_description") or token_data.get("error")
        return html_response(400, error_page(f"Failed to obtain access token: {description}"), headers)

    access_token = token_data.get("access_token")
    if not access_token:
        logger.error("No access token in response: keys=%s", sorted(token_data))
        return html_response(400, error_page(f"No access token received from {config.provider_name}"), headers)

    logger.info(
        "Token exchange successful: token_type=%s scope=%s",
        token_data.get("token_type"),
        token_data.get("scope"),
    )
    return html_response(200, success_page(str(access_token), frontend_origin), {**headers, **NO_CACHE_HEADERS})
