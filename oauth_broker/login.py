"""
Login initiator (/oauth/login).
Builds the CSRF state, sets the state cookie, and redirects the browser to the provider's authorize endpoint.
"""
import logging

from oauth_broker.config import BrokerConfig, validate_project_id
from oauth_broker.cookies import state_cookie
from oauth_broker.origins import cors_headers, is_known_project, validate_config
from oauth_broker.provider import build_authorize_url
from oauth_broker.state import compose_state, generate_state
from oauth_broker.web import BrokerRequest, BrokerResponse, json_response

logger = logging.getLogger(__name__)


def _requested_project(config: BrokerConfig, raw: str | None) -> str:
    """
    Project from the query string. Unknown ids are kept (warning only); ids that could not
    survive the state encoding fall back to the default project.
    """
    project = (raw or "").strip()
    if not project:
        return config.default_project
    if not validate_project_id(project):
        logger.warning("Malformed project id %r, using default %s", project, config.default_project)
        return config.default_project
    if not is_known_project(config, project):
        logger.warning("Unknown project: %s, continuing with login", project)
    return project


def initiate_login(config: BrokerConfig, request: BrokerRequest) -> BrokerResponse:
    logger.info("OAuth login request received: method=%s params=%s", request.method, sorted(request.query))

    errors = validate_config(config)
    if errors:
        logger.error("Configuration validation failed: %s", errors)
        return json_response(500, {"error": "Server configuration error", "details": errors})

    headers = cors_headers(config, request.origin)

    if request.method == "OPTIONS":
        return json_response(200, {"message": "OK"}, headers)
    if request.method != "GET":
        return json_response(405, {"error": "Method not allowed"}, headers)

    try:
        project = _requested_project(config, request.query.get("project"))
        random_part = generate_state(config.state_bytes)
        state = compose_state(random_part, project)
        redirect_uri = config.callback_url(project)

        logger.info("Generating OAuth URL: project=%s state_length=%d callback=%s", project, len(random_part), redirect_uri)
        location = build_authorize_url(
            authorize_url=config.authorize_url,
            client_id=config.client_id,
            redirect_uri=redirect_uri,
            scope=config.scope,
            state=state,
        )
        return BrokerResponse(
            status_code=302,
            headers={**headers, "Location": location},
            cookies=[state_cookie(config, state)],
        )
    except Exception:
        logger.exception("OAuth login error")
        return json_response(500, {"error": "Internal server error"}, headers)
