from __future__ import annotations

from typing import Sequence

from jinja2 import BaseLoader, Environment, FileSystemLoader, StrictUndefined, TemplateNotFound

"""Jinja2 loader helpers used to locate asset sources.

Asset sources are never rendered; only the loader's ordered search path
resolution is used, so the environment below exists to satisfy the loader API.
"""

# Singleton environment reused across the process
JINJA_ENV: Environment = Environment(undefined=StrictUndefined, autoescape=False)


def build_loader(search_paths: Sequence[str]) -> BaseLoader:
    """Build a loader that searches 'search_paths' in order."""
    return FileSystemLoader(list(search_paths), encoding="utf-8")


def find_source(loader: BaseLoader, name: str) -> tuple[str, str] | None:
    """Return (source, filename) for 'name', or None when no search path has it."""
    try:
        source, filename, _uptodate = loader.get_source(JINJA_ENV, name)
    except TemplateNotFound:
        return None
    return source, filename or name
