"""Resolve schemas from ``module:attribute`` import paths."""

import importlib
from typing import Any


def import_schema(path: str) -> Any:
    """
    Import a schema object from an import path.

    Args:
        path: ``package.module:Name`` (``package.module.Name`` also works)

    Returns:
        The imported object

    Raises:
        ValueError: If the path is malformed or does not resolve
    """
    if ":" in path:
        module_name, _, attr_path = path.partition(":")
    else:
        module_name, _, attr_path = path.rpartition(".")
    if not module_name or not attr_path:
        raise ValueError(f"Invalid schema path: {path!r} (expected 'module:Name')")

    try:
        obj: Any = importlib.import_module(module_name)
    except ImportError as e:
        raise ValueError(f"Cannot import module {module_name!r}: {e}") from e

    for attr in attr_path.split("."):
        try:
            obj = getattr(obj, attr)
        except AttributeError as e:
            raise ValueError(f"{module_name!r} has no attribute {attr_path!r}") from e
    return obj
