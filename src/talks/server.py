import json
import logging
import os
import re
import socket
import urllib.parse
from functools import partial
from http import HTTPStatus
from http.server import ThreadingHTTPServer, SimpleHTTPRequestHandler
from typing import Optional, Tuple

from talks import resources
from talks.errors import ListenError
from talks.router import Router
from talks.version import (
    VERSION_MAJOR,
    VERSION_MINOR,
    VERSION_REVISION,
    server_header,
    version,
)

logger = logging.getLogger(__name__)

VERSIONS_PATH = "/talks/v1/versions"
COLLECT_PATH = "/talks/v1/collect"
ICECONFIG_PATH = "/talks/v1/iceconfig"

# JSONP callbacks are echoed into the body, so only plain JS names are allowed.
_CALLBACK_RE = re.compile(r"^[A-Za-z_$][A-Za-z0-9_$.]*$")


def write_body(req: SimpleHTTPRequestHandler, body: bytes, content_type: str) -> None:
    req.send_response(HTTPStatus.OK)
    req.send_header("Content-Type", content_type)
    req.send_header("Content-Length", str(len(body)))
    req.end_headers()
    if req.command != "HEAD":
        req.wfile.write(body)


def version_report() -> dict:
    return {
        "code": 0,
        "server": os.getpid(),
        "data": {
            "major": VERSION_MAJOR,
            "minor": VERSION_MINOR,
            "revision": VERSION_REVISION,
            "extra": 0,
            "version": version(),
        },
    }


def write_version(req: SimpleHTTPRequestHandler) -> None:
    query = urllib.parse.parse_qs(urllib.parse.urlsplit(req.path).query)
    callback = query.get("callback", [""])[0]
    body = json.dumps(version_report())
    if callback and _CALLBACK_RE.match(callback):
        write_body(req, f"{callback}({body});".encode("utf-8"), "text/javascript")
        return
    write_body(req, body.encode("utf-8"), "application/json")


def write_pixel(req: SimpleHTTPRequestHandler) -> None:
    write_body(req, resources.TRACKING_PIXEL, "image/gif")


def write_iceconfig(req: SimpleHTTPRequestHandler) -> None:
    write_body(req, resources.ICE_CONFIG_BODY, "application/json")


def serve_static(req: SimpleHTTPRequestHandler) -> None:
    # Plain SimpleHTTPRequestHandler behavior against the handler's directory.
    if req.command == "HEAD":
        SimpleHTTPRequestHandler.do_HEAD(req)
    else:
        SimpleHTTPRequestHandler.do_GET(req)


def build_router() -> Router:
    router = Router()
    router.handle(VERSIONS_PATH, write_version)
    router.handle(COLLECT_PATH, write_pixel)
    router.handle(ICECONFIG_PATH, write_iceconfig)
    router.handle("/", serve_static)
    return router


class TalksHandler(SimpleHTTPRequestHandler):
    # Extend MIME map for common modern types
    extensions_map = {
        **getattr(SimpleHTTPRequestHandler, "extensions_map", {}),
        ".js": "application/javascript",
        ".mjs": "application/javascript",
        ".json": "application/json",
        ".wasm": "application/wasm",
        ".svg": "image/svg+xml",
    }

    def __init__(self, *args, router: Optional[Router] = None, **kwargs):
        # Must be set before super().__init__, which handles the request.
        self.router = router
        super().__init__(*args, **kwargs)

    def version_string(self) -> str:
        # send_response writes this as the first header of every response.
        return server_header()

    def log_message(self, fmt, *args):
        logger.info("[HTTP] %s %s", self.address_string(), fmt % args)

    def dispatch(self):
        handler = self.router.match(self.path) if self.router else None
        if handler is None:
            self.send_error(HTTPStatus.NOT_FOUND)
            return
        try:
            handler(self)
        except (BrokenPipeError, ConnectionResetError) as e:
            logger.debug("write %s to %s: %s", self.path, self.address_string(), e)

    def do_GET(self):
        self.dispatch()

    def do_HEAD(self):
        self.dispatch()


class TalksHTTPServer(ThreadingHTTPServer):
    def __init__(self, server_address, handler_cls):
        if ":" in server_address[0]:
            self.address_family = socket.AF_INET6
        super().__init__(server_address, handler_cls)


def parse_listen(listen: str) -> Tuple[str, int]:
    """Split a host:port listen string. An empty host (":8080") means all interfaces."""
    host, sep, port = listen.rpartition(":")
    if not sep:
        raise ListenError(f"listen {listen!r}: missing port")
    if host.startswith("[") and host.endswith("]"):
        host = host[1:-1]
    try:
        port_num = int(port)
    except ValueError as e:
        raise ListenError(f"listen {listen!r}: invalid port {port!r}") from e
    if not 0 <= port_num <= 65535:
        raise ListenError(f"listen {listen!r}: port out of range")
    return host, port_num


def create_server(listen: str, root: str, router: Router) -> TalksHTTPServer:
    host, port = parse_listen(listen)
    handler_cls = partial(TalksHandler, router=router, directory=root)
    try:
        return TalksHTTPServer((host, port), handler_cls)
    except OSError as e:
        raise ListenError(f"listen {listen}: {e}") from e


def run_server(listen: str, root: str, router: Router):
    httpd = create_server(listen, root, router)
    host, port = httpd.server_address[:2]
    logger.info("Serving %s at http://%s:%s", os.path.abspath(root), host or "0.0.0.0", port)
    try:
        httpd.serve_forever()
    except KeyboardInterrupt:
        logger.info("Shutting down...")
    finally:
        httpd.server_close()
