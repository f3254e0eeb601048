"""
Find the directory to serve static files from.

The configured html path is tried as given first (absolute, or relative to
the working directory), then next to the running program, so a deployment
can ship the html directory either way.
"""
import os
import sys
from typing import Callable, Iterable, Optional, Sequence

from talks.errors import RootNotFoundError

# A strategy maps the configured html string to one candidate path.
Strategy = Callable[[str], str]


def as_given(html: str) -> str:
    return html


def beside_executable(html: str, argv0: Optional[str] = None) -> str:
    program = sys.argv[0] if argv0 is None else argv0
    return os.path.join(os.path.dirname(program), html)


DEFAULT_STRATEGIES: Sequence[Strategy] = (as_given, beside_executable)


def candidates(html: str, strategies: Optional[Iterable[Strategy]] = None):
    for strategy in strategies or DEFAULT_STRATEGIES:
        yield strategy(html)


def resolve_root(html: str, strategies: Optional[Iterable[Strategy]] = None) -> str:
    """Return the first candidate that is an existing directory."""
    tried = []
    for root in candidates(html, strategies):
        if os.path.isdir(root):
            return root
        tried.append(root)
    raise RootNotFoundError(f"guess {html}: no such directory, tried {', '.join(tried)}")
