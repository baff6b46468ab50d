"""
OAuth broker configuration. Values come from the environment; nothing secret lives in this file.
Loaded once into an immutable BrokerConfig and handed to each handler (see get_config).
"""
import os
import re
from collections.abc import Mapping
from dataclasses import dataclass
from types import MappingProxyType
from functools import lru_cache

# Project ids are embedded in the state token after the ":" separator, so ":" is never allowed.
PROJECT_ID_PATTERN = re.compile(r"^[A-Za-z0-9_-]{1,64}$")

# Minimum random bytes in the CSRF state before hex encoding
MIN_STATE_BYTES = 16

# CSRF cookie lifetime (seconds): long enough for the user to finish the provider UI
STATE_COOKIE_MAX_AGE = 600
STATE_COOKIE_NAME = "oauth_state"

GITHUB_AUTHORIZE_URL = "https://github.com/login/oauth/authorize"
GITHUB_TOKEN_URL = "https://github.com/login/oauth/access_token"

# Loopback origins accepted outside production (frontend dev servers)
LOCAL_DEV_ORIGINS = (
    "http://localhost:3000",
    "http://localhost:3001",
    "http://localhost:5173",
    "http://localhost:5174",
)


@dataclass(frozen=True)
class Project:
    id: str
    frontend_origin: str


@dataclass(frozen=True)
class BrokerConfig:
    client_id: str | None
    client_secret: str | None
    production: bool
    base_url: str
    default_project: str
    projects: Mapping[str, Project]
    callback_path: str = "/oauth/callback"
    additional_origins: tuple[str, ...] = ()
    scope: str = "repo,user"
    authorize_url: str = GITHUB_AUTHORIZE_URL
    token_url: str = GITHUB_TOKEN_URL
    provider_name: str = "GitHub"
    state_bytes: int = MIN_STATE_BYTES
    token_timeout: float = 10.0
    cookie_domain: str | None = None
    qualify_redirect_uri: bool = False
    environment: str = "development"

    def __post_init__(self):
        # Registry is read-only for the process lifetime
        object.__setattr__(self, "projects", MappingProxyType(dict(self.projects)))

    def callback_url(self, project: str | None = None) -> str:
        """Redirect URI sent to the provider. Must be identical on the authorize and token calls."""
        url = f"{self.base_url}{self.callback_path}"
        if project and self.qualify_redirect_uri:
            return f"{url}?project={project}"
        return url


def validate_project_id(project_id: str) -> bool:
    return bool(project_id) and PROJECT_ID_PATTERN.match(project_id) is not None


def _env(*names: str) -> str | None:
    """First non-empty value among the given env vars."""
    for name in names:
        value = (os.environ.get(name, "") or "").strip()
        if value:
            return value
    return None


def _parse_csv(value: str | None) -> tuple[str, ...]:
    items = [x.strip() for x in (value or "").split(",")]
    return tuple(x for x in items if x)


def _int_env(name: str, default: int) -> int:
    value = _env(name)
    if value is None:
        return default
    try:
        return int(value)
    except ValueError:
        raise ValueError(f"{name} must be an integer, got {value!r}") from None


def _float_env(name: str, default: float) -> float:
    value = _env(name)
    if value is None:
        return default
    try:
        return float(value)
    except ValueError:
        raise ValueError(f"{name} must be a number, got {value!r}") from None


def _flag(value: str | None) -> bool:
    return (value or "").strip().lower() in ("1", "true", "yes", "on")


def default_projects(production: bool) -> dict[str, Project]:
    if production:
        create, prompts = "https://create.rbios.net", "https://prompts.rbios.net"
    else:
        create, prompts = "http://localhost:5173", "http://localhost:5174"
    return {
        "create": Project(id="create", frontend_origin=create),
        "prompts": Project(id="prompts", frontend_origin=prompts),
    }


def parse_projects(value: str) -> dict[str, Project]:
    """
    Parse a registry of the form "id=origin,id=origin".
    Raises ValueError for malformed entries or ids outside PROJECT_ID_PATTERN.
    """
    projects: dict[str, Project] = {}
    for entry in _parse_csv(value):
        project_id, sep, origin = entry.partition("=")
        project_id, origin = project_id.strip(), origin.strip().rstrip("/")
        if not sep or not origin:
            raise ValueError(f"Invalid project registration: {entry!r}")
        if not validate_project_id(project_id):
            raise ValueError(f"Invalid project id: {project_id!r}")
        projects[project_id] = Project(id=project_id, frontend_origin=origin)
    return projects


def load_config() -> BrokerConfig:
    """Build a BrokerConfig from environment variables."""
    environment = (_env("OAUTH_ENV") or "development").lower()
    production = environment == "production"

    registry = _env("OAUTH_PROJECTS")
    projects = parse_projects(registry) if registry else default_projects(production)

    default_project = _env("OAUTH_DEFAULT_PROJECT") or "create"
    if not validate_project_id(default_project):
        raise ValueError(f"Invalid default project id: {default_project!r}")

    base_url = _env("OAUTH_API_URL") or ("https://api.rbios.net" if production else "http://localhost:3000")

    state_bytes = _int_env("OAUTH_STATE_BYTES", MIN_STATE_BYTES)
    if state_bytes < MIN_STATE_BYTES:
        state_bytes = MIN_STATE_BYTES

    return BrokerConfig(
        client_id=_env("GITHUB_CLIENT_ID", "GH_CLIENT_ID"),
        client_secret=_env("GITHUB_CLIENT_SECRET", "GH_CLIENT_SECRET"),
        production=production,
        environment=environment,
        base_url=base_url.rstrip("/"),
        callback_path=_env("OAUTH_CALLBACK_PATH") or "/oauth/callback",
        default_project=default_project,
        projects=projects,
        additional_origins=_parse_csv(_env("ADDITIONAL_ORIGINS")),
        scope=_env("OAUTH_SCOPE") or "repo,user",
        authorize_url=_env("OAUTH_AUTHORIZE_URL") or GITHUB_AUTHORIZE_URL,
        token_url=_env("OAUTH_TOKEN_URL") or GITHUB_TOKEN_URL,
        provider_name=_env("OAUTH_PROVIDER_NAME") or "GitHub",
        state_bytes=state_bytes,
        token_timeout=_float_env("OAUTH_TOKEN_TIMEOUT", 10.0),
        cookie_domain=_env("OAUTH_COOKIE_DOMAIN"),
        qualify_redirect_uri=_flag(_env("OAUTH_QUALIFY_REDIRECT_URI")),
    )


@lru_cache(maxsize=1)
def get_config() -> BrokerConfig:
    """FastAPI dependency. Cached for the process lifetime; tests override it on the app."""
    return load_config()
