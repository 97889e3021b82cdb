r"""pulse\app\api\v1\__init__.py

Routers for the FastAPI application.  Each router declares its full path."""

from importlib import import_module
from typing import Any

__all__ = [
    "health",
    "metrics",
]


def __getattr__(name: str) -> Any:
    if name in __all__:
        module = import_module(f"{__name__}.{name}")
        globals()[name] = module
        return module
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")
