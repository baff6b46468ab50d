"""
Origin resolver: project id -> registered frontend origin, plus the CORS allow-list.
"""
import logging

from oauth_broker.config import LOCAL_DEV_ORIGINS, BrokerConfig

logger = logging.getLogger(__name__)

CORS_ALLOW_HEADERS = "Content-Type, Authorization"
CORS_ALLOW_METHODS = "GET, POST, OPTIONS"


def is_known_project(config: BrokerConfig, project_id: str | None) -> bool:
    return bool(project_id) and project_id in config.projects


def resolve_frontend_origin(config: BrokerConfig, project_id: str | None) -> str:
    """
    Registered origin for project_id. Unknown ids resolve to the default project's origin
    (logged as a warning); this never raises.
    """
    project = config.projects.get(project_id or "")
    if project is not None:
        return project.frontend_origin
    logger.warning("Unknown project: %s, using default %s", project_id, config.default_project)
    default = config.projects.get(config.default_project)
    if default is not None:
        return default.frontend_origin
    # Default id not registered: first registration, else first allowed origin
    for project in config.projects.values():
        return project.frontend_origin
    origins = allowed_origins(config)
    return origins[0] if origins else ""


def allowed_origins(config: BrokerConfig) -> list[str]:
    """Registered origins, then ADDITIONAL_ORIGINS, then loopback origins outside production."""
    candidates = [p.frontend_origin for p in config.projects.values()]
    candidates.extend(config.additional_origins)
    if not config.production:
        candidates.extend(LOCAL_DEV_ORIGINS)
    origins: list[str] = []
    for origin in candidates:
        if origin and origin not in origins:
            origins.append(origin)
    return origins


def is_allowed_origin(config: BrokerConfig, origin: str | None) -> bool:
    return bool(origin) and origin in allowed_origins(config)


def cors_headers(config: BrokerConfig, origin: str | None) -> dict[str, str]:
    """
    CORS headers for a request Origin. Origins off the allow-list get the list's first entry;
    the browser enforces the actual origin match.
    """
    origins = allowed_origins(config)
    if origin and origin in origins:
        allow_origin = origin
    else:
        allow_origin = origins[0] if origins else ""
    return {
        "Access-Control-Allow-Origin": allow_origin,
        "Access-Control-Allow-Headers": CORS_ALLOW_HEADERS,
        "Access-Control-Allow-Methods": CORS_ALLOW_METHODS,
        "Access-Control-Allow-Credentials": "true",
    }


def validate_config(config: BrokerConfig) -> list[str]:
    """Return the list of configuration problems (empty when the config is usable)."""
    errors = []
    if not config.client_id:
        errors.append(f"Missing {config.provider_name} Client ID")
    if not config.client_secret:
        errors.append(f"Missing {config.provider_name} Client Secret")
    if not allowed_origins(config):
        errors.append("No allowed origins configured")
    return errors
