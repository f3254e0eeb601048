"""
A small request multiplexer.

Patterns ending in "/" match every path below them, other patterns match one
path exactly. The first registered pattern that matches wins, so specific
routes have to be registered before the "/" catch-all.
"""
import logging
import urllib.parse
from typing import Callable, List, Optional, Tuple

logger = logging.getLogger(__name__)

# Route handlers receive the live request handler (a BaseHTTPRequestHandler).
Handler = Callable[..., None]


def matches(pattern: str, path: str) -> bool:
    if pattern.endswith("/"):
        return path.startswith(pattern)
    return path == pattern


class Router:
    def __init__(self):
        self._routes: List[Tuple[str, Handler]] = []

    def handle(self, pattern: str, handler: Handler) -> None:
        if not pattern.startswith("/"):
            raise ValueError(f"pattern must start with '/': {pattern!r}")
        if any(p == pattern for p, _ in self._routes):
            raise ValueError(f"pattern already registered: {pattern}")
        logger.info("Handle %s", pattern)
        self._routes.append((pattern, handler))

    def match(self, path: str) -> Optional[Handler]:
        path = urllib.parse.unquote(path.split("?", 1)[0])
        for pattern, handler in self._routes:
            if matches(pattern, path):
                return handler
        return None

    @property
    def patterns(self) -> List[str]:
        return [p for p, _ in self._routes]
