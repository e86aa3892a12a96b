from __future__ import annotations

from typing import Any, Callable, Optional, Protocol


class Artifact(Protocol):
    """A compiled asset as handed out by a compilation environment.

    - str(artifact): the compiled text content
    - logical_path: logical path including the final extension, e.g. 'app.js'
    """
    logical_path: str

    def __str__(self) -> str: ...

    def write_to(self, path: str, compress: bool = False) -> None: ...


class CompilationEnvironment(Protocol):
    """The engine that resolves logical names into compiled artifacts."""

    def append_path(self, path: str) -> None: ...

    def lookup(self, logical_name: str) -> Optional[Artifact]: ...

    def option_setters(self) -> dict[str, Callable[[Any], None]]: ...
