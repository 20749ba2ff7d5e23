# src/weather_dashboard/__init__.py
"""
weather-dashboard package init.

Exports
-------
__version__      : str
build_controller : wire gateway, resolver and classifier for a view
run()            : convenience wrapper to load the default city once
"""

from __future__ import annotations

from .settings import Settings
from .controller import build_controller

# Bump this when you tag releases; used by CLI and User-Agent.
__version__ = "0.1.0"


def run() -> int:
    """
    Convenience runner:
        from weather_dashboard import run
        run()
    Equivalent to: `python -m weather_dashboard`
    """
    from .cli import main

    return main([])


__all__ = ["__version__", "Settings", "build_controller", "run"]
