"""
OAuth broker service.
GET /oauth/login, GET /oauth/callback, /health. One provider app shared by several frontends;
the client secret stays on this server.
"""
import logging
import os

from fastapi import Depends, FastAPI, Request
from fastapi.responses import Response

from oauth_broker.callback import process_callback
from oauth_broker.config import BrokerConfig, get_config
from oauth_broker.cookies import parse_cookie_header
from oauth_broker.login import initiate_login
from oauth_broker.web import BrokerRequest, BrokerResponse

logger = logging.getLogger(__name__)

app = FastAPI(title="OAuth Broker", version="1.0.0")

LOGIN_METHODS = ["GET", "OPTIONS", "POST", "PUT", "PATCH", "DELETE"]


def to_broker_request(request: Request) -> BrokerRequest:
    """Translate a Starlette request into the narrow request the protocol steps use."""
    return BrokerRequest(
        method=request.method.upper(),
        path=request.url.path,
        query=dict(request.query_params),
        cookies=parse_cookie_header(request.headers.get("cookie")),
        headers={k.lower(): v for k, v in request.headers.items()},
    )


def to_response(result: BrokerResponse) -> Response:
    response = Response(
        content=result.body,
        status_code=result.status_code,
        headers=result.headers,
        media_type=result.media_type,
    )
    for cookie in result.cookies:
        response.headers.append("set-cookie", cookie)
    return response


@app.get("/health")
def health(config: BrokerConfig = Depends(get_config)):
    """Health check endpoint."""
    return {"status": "ok", "service": "oauth_broker", "environment": config.environment}


@app.get("/")
def index():
    return {
        "service": "OAuth Broker",
        "version": app.version,
        "endpoints": [
            "GET /oauth/login - Initiate OAuth flow",
            "GET /oauth/callback - Handle OAuth callback",
            "GET /health - Health check",
        ],
    }


@app.api_route("/oauth/login", methods=LOGIN_METHODS)
def oauth_login(request: Request, config: BrokerConfig = Depends(get_config)):
    """
    Start the flow: ?project=<id> selects the frontend the token is delivered to.
    OPTIONS answers the CORS preflight; methods other than GET get 405.
    """
    return to_response(initiate_login(config, to_broker_request(request)))


@app.get("/oauth/callback")
def oauth_callback(request: Request, config: BrokerConfig = Depends(get_config)):
    """Provider redirect target: ?code=...&state=... or ?error=..."""
    return to_response(process_callback(config, to_broker_request(request)))


if __name__ == "__main__":
    import uvicorn

    logging.basicConfig(
        level=os.environ.get("OAUTH_LOG_LEVEL", "INFO").upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    uvicorn.run(
        "oauth_broker.main:app",
        host=os.environ.get("HOST", "127.0.0.1"),
        port=int(os.environ.get("PORT", "3000")),
        reload=os.environ.get("OAUTH_ENV", "development") != "production",
    )
