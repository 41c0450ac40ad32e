from __future__ import annotations

import logging

from flask import Flask, Response, jsonify, request

from ..container import Container
from ..core.exceptions import TransientNetworkError

logger = logging.getLogger(__name__)

CORS_HEADERS = {
    "Access-Control-Allow-Origin": "*",
    "Access-Control-Allow-Methods": "GET, POST, PUT, DELETE, OPTIONS",
    "Access-Control-Allow-Headers": "Content-Type, Authorization",
}

PROXY_METHODS = ["GET", "POST", "PUT", "DELETE", "OPTIONS"]


def _with_cors(response: Response) -> Response:
    for key, value in CORS_HEADERS.items():
        response.headers[key] = value
    return response


def _proxy_error(message: str) -> Response:
    response = jsonify({"success": False, "error": "Proxy error", "message": message})
    response.status_code = 500
    return _with_cors(response)


def register(app: Flask, container: Container) -> None:
    forwarder = container.proxy
    prefix = forwarder.prefix

    def proxy(subpath: str = ""):
        if request.method == "OPTIONS":
            return _with_cors(Response(status=200))

        try:
            result = forwarder.forward(
                request.method,
                request.path,
                query=request.query_string.decode("utf-8", "replace"),
                headers=dict(request.headers),
                body=request.get_data() or None,
            )
        except TransientNetworkError as e:
            return _proxy_error(str(e))
        except Exception as e:
            logger.exception("proxy %s %s crashed", request.method, request.path)
            return _proxy_error(str(e) or type(e).__name__)

        if result.payload is None:
            response = Response(status=result.status)
        else:
            response = jsonify(result.payload)
            response.status_code = result.status
        return _with_cors(response)

    app.add_url_rule(prefix, endpoint="proxy_root", view_func=proxy, methods=PROXY_METHODS)
    app.add_url_rule(f"{prefix}/<path:subpath>", endpoint="proxy", view_func=proxy, methods=PROXY_METHODS)
