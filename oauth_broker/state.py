"""
CSRF state token: "<random-hex>:<project-id>".
The random part binds the callback to the cookie; the project part routes the token delivery.
"""
import secrets

from oauth_broker.config import MIN_STATE_BYTES

STATE_SEPARATOR = ":"


def generate_state(num_bytes: int = MIN_STATE_BYTES) -> str:
    """Hex-encoded random value from the OS CSPRNG. Never fewer than MIN_STATE_BYTES bytes."""
    return secrets.token_hex(max(num_bytes, MIN_STATE_BYTES))


def compose_state(random_part: str, project: str) -> str:
    return f"{random_part}{STATE_SEPARATOR}{project}"


def project_from_state(state: str, default_project: str) -> str:
    """Project id after the first separator; default_project if the state carries none."""
    _, sep, project = state.partition(STATE_SEPARATOR)
    if not sep or not project:
        return default_project
    return project


def redact(value: str | None) -> str | None:
    """First 8 characters for logs."""
    if value is None:
        return None
    return value[:8] + "..."
