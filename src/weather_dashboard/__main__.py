# src/weather_dashboard/__main__.py
"""
Module entrypoint so `python -m weather_dashboard ...` works.

Delegates to cli.main(argv) and exits with its return code.
"""

from __future__ import annotations

from .cli import main

if __name__ == "__main__":
    raise SystemExit(main())
