# COMPONENT: API REQUEST / RESPONSE LOGGING MIDDLEWARE
# REQUIREMENTS SATISFIED: backend observability and debugging support
"""
src/cinetech/api/middleware/log_requests.py

ASGI middleware that logs every HTTP exchange handled by the catalog API.

Each request is tagged with a short request id, published through
`request_id_var` so that every record logged while the request is
handled (store mutations included) carries it. One INFO line is written
per exchange (method, path, status, latency). At DEBUG level the request
and response bodies are logged as well, pretty-printed when they are
JSON and truncated so that large snapshot exports do not flood the log.

Non-HTTP ASGI events (lifespan) are passed through untouched. The
middleware never modifies the request or the response.
"""
import json
import time
import uuid

from starlette.types import ASGIApp, Message, Receive, Scope, Send

from cinetech.utils.logging import logger, request_id_var

BODY_LOG_LIMIT = 2000


def _render_body(raw: bytes) -> str:
    text = raw.decode("utf-8", errors="replace")
    try:
        text = json.dumps(json.loads(text), indent=2, ensure_ascii=False)
    except ValueError:
        pass
    if len(text) > BODY_LOG_LIMIT:
        return text[:BODY_LOG_LIMIT] + f"... ({len(text)} chars)"
    return text


class DeepASGILogger:
    def __init__(self, app: ASGIApp):
        self.app = app

    async def __call__(self, scope: Scope, receive: Receive, send: Send):
        if scope["type"] != "http":
            await self.app(scope, receive, send)
            return

        rid = str(uuid.uuid4())[:8]
        method = scope.get("method")
        path = scope.get("path")

        # ------------------------------
        # Capture request body
        # ------------------------------
        body_bytes = b""

        async def recv_wrapper() -> Message:
            nonlocal body_bytes
            msg = await receive()
            if msg["type"] == "http.request":
                body_bytes += msg.get("body", b"")
            return msg

        # ------------------------------
        # Prepare response capture
        # ------------------------------
        resp_body = b""
        status_code = None

        async def send_wrapper(message: Message):
            nonlocal resp_body, status_code
            if message["type"] == "http.response.start":
                status_code = message["status"]
            if message["type"] == "http.response.body":
                resp_body += message.get("body", b"")
            await send(message)

        token = request_id_var.set(rid)
        start = time.time()
        try:
            await self.app(scope, recv_wrapper, send_wrapper)
        finally:
            duration_ms = round((time.time() - start) * 1000, 2)
            logger.info("%s %s -> %s (%sms)", method, path, status_code, duration_ms)
            if body_bytes:
                logger.debug("request body: %s", _render_body(body_bytes))
            if resp_body:
                logger.debug("response body: %s", _render_body(resp_body))
            request_id_var.reset(token)
