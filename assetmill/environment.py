from __future__ import annotations

import gzip
import logging
import os
import posixpath
from dataclasses import dataclass, field
from typing import Any, Callable, Optional

from .jinja import build_loader, find_source

logger = logging.getLogger(__name__)

# Extensions tried, in order, for a logical name given without one
DEFAULT_EXTENSIONS: tuple[str, ...] = (".js", ".css")


@dataclass
class CompiledAsset:
    """A resolved asset source ready to be persisted."""
    logical_path: str
    source: str
    # File the source was read from, if any
    filename: str | None = None

    def __str__(self) -> str:
        return self.source

    def write_to(self, path: str, compress: bool = False) -> None:
        """Persist the content at 'path', gzip-encoded when 'compress' is set.

        Parent directories are created as needed. I/O errors propagate.
        """
        parent = os.path.dirname(path)
        if parent:
            os.makedirs(parent, exist_ok=True)
        data = self.source.encode("utf-8")
        if compress:
            # mtime=0 keeps the compressed bytes stable for identical content
            data = gzip.compress(data, mtime=0)
        with open(path, "wb") as f:
            f.write(data)
        logger.debug("wrote %s (%d bytes, compress=%s)", path, len(data), compress)


@dataclass
class AssetEnvironment:
    """Default compilation environment backed by plain source directories.

    Paths are searched in registration order. Compressors may be callables
    taking and returning text; other values are recorded but not applied.
    """
    paths: list[str] = field(default_factory=list)
    extensions: tuple[str, ...] = DEFAULT_EXTENSIONS
    js_compressor: Any = None
    css_compressor: Any = None
    version: str = ""

    def append_path(self, path: str) -> None:
        self.paths.append(path)
        logger.debug("appended asset path %s", path)

    def set_js_compressor(self, value: Any) -> None:
        self.js_compressor = value
        logger.debug("js_compressor set to %r", value)

    def set_css_compressor(self, value: Any) -> None:
        self.css_compressor = value
        logger.debug("css_compressor set to %r", value)

    def set_version(self, value: Any) -> None:
        self.version = str(value)

    def option_setters(self) -> dict[str, Callable[[Any], None]]:
        """Map each recognized option name to the setter that applies it."""
        return {
            "js_compressor": self.set_js_compressor,
            "css_compressor": self.set_css_compressor,
            "version": self.set_version,
        }

    def lookup(self, logical_name: str) -> Optional[CompiledAsset]:
        """Resolve 'logical_name' against the registered paths, or return None."""
        loader = build_loader(self.paths)
        for candidate in self._candidates(logical_name):
            found = find_source(loader, candidate)
            if found is None:
                continue
            source, filename = found
            return CompiledAsset(
                logical_path=candidate,
                source=self._compress(candidate, source),
                filename=filename,
            )
        return None

    def __getitem__(self, logical_name: str) -> Optional[CompiledAsset]:
        return self.lookup(logical_name)

    def _candidates(self, logical_name: str) -> list[str]:
        _, ext = posixpath.splitext(logical_name)
        if ext in self.extensions:
            return [logical_name]
        candidates = [logical_name + e for e in self.extensions]
        if ext:
            # 'jquery.min' may be a full name or a stem
            candidates.append(logical_name)
        return candidates

    def _compress(self, logical_path: str, source: str) -> str:
        _, ext = posixpath.splitext(logical_path)
        if ext == ".js":
            compressor = self.js_compressor
        elif ext == ".css":
            compressor = self.css_compressor
        else:
            compressor = None
        if callable(compressor):
            return compressor(source)
        return source
