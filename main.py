#!/usr/bin/env python3
"""
Launcher for running the server from a source checkout without installing it:

    python main.py -conf talks.conf

The implementation lives in talks.cli (src layout); once installed the same
entry point is available as the ``talks`` command.
"""
# Support running from source without install (src layout)
try:
    from talks.cli import main as _main
except ModuleNotFoundError:  # pragma: no cover - fallback for local runs
    import os
    import sys as _sys
    here = os.path.dirname(os.path.abspath(__file__))
    src = os.path.join(here, "src")
    if os.path.isdir(src) and src not in _sys.path:
        _sys.path.insert(0, src)
    from talks.cli import main as _main

__all__ = ["main"]


def main():
    return _main()


if __name__ == "__main__":
    main()
