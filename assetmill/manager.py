from __future__ import annotations

import hashlib
import io
import logging
import posixpath
import threading
from pathlib import Path
from types import MappingProxyType
from typing import Any, Callable, Iterable, Mapping, Optional, Pattern, TextIO

from .directives import compile_pattern, substitute
from .environment import AssetEnvironment
from .types import Artifact, CompilationEnvironment

logger = logging.getLogger(__name__)

DEFAULT_OPTIONS: Mapping[str, Any] = MappingProxyType({
    "src_pre": "[%",
    "src_post": "%]",
    "js_compressor": None,
    "css_compressor": None,
})

DEFAULT_TYPE = "javascripts"

# Extension tried first for a bare logical name, by asset type
TYPE_EXTENSIONS: Mapping[str, str] = MappingProxyType({
    "javascripts": ".js",
    "javascript": ".js",
    "js": ".js",
    "stylesheets": ".css",
    "stylesheet": ".css",
    "css": ".css",
})


class AssetManager:
    """Compile logical assets to content-hashed files and rewrite templates.

    The compilation environment is created lazily by 'environment_factory'
    and configured from 'options' and 'paths' the first time compiled() is
    called. 'directory' qualifies both source paths and output paths.
    """

    def __init__(
        self,
        options: Mapping[str, Any] | None = None,
        paths: Iterable[str] | None = None,
        directory: str | None = None,
        type: str = DEFAULT_TYPE,
        environment_factory: Callable[[], CompilationEnvironment] = AssetEnvironment,
    ) -> None:
        self.options = options
        self.paths = paths
        self.directory = directory
        self.type = type
        self._environment_factory = environment_factory
        self._environment: Optional[CompilationEnvironment] = None
        self._loaded = False
        self._lock = threading.RLock()

    @property
    def options(self) -> dict[str, Any]:
        return self._options

    @options.setter
    def options(self, value: Mapping[str, Any] | None) -> None:
        # Always relative to the defaults, never cumulative
        merged = dict(DEFAULT_OPTIONS)
        merged.update(value or {})
        self._options = merged

    @property
    def paths(self) -> list[str]:
        return self._paths

    @paths.setter
    def paths(self, value: Iterable[str] | None) -> None:
        if value is None or isinstance(value, Mapping):
            self._paths = []
        elif isinstance(value, str):
            self._paths = [value]
        else:
            self._paths = list(value)

    @property
    def environment(self) -> CompilationEnvironment:
        """The memoized compilation environment, created on first access."""
        with self._lock:
            if self._environment is None:
                self._environment = self._environment_factory()
                logger.debug("created compilation environment %r", self._environment)
            return self._environment

    def load_options(self) -> None:
        """Apply every recognized, set option to the environment."""
        env = self.environment
        for key, setter in env.option_setters().items():
            value = self.options.get(key)
            if value is None:
                continue
            setter(value)
            logger.debug("applied option %s=%r", key, value)

    def load_paths(self) -> None:
        """Register the directory-qualified source paths with the environment."""
        env = self.environment
        for path in self.paths or ():
            env.append_path(self._qualify(path))

    def compiled(self) -> CompilationEnvironment:
        """Return the environment, loading options and paths exactly once."""
        with self._lock:
            if not self._loaded:
                self.load_options()
                self.load_paths()
                self._loaded = True
            return self.environment

    def lookup(self, logical_name: str) -> Optional[Artifact]:
        """Find an asset, preferring the extension of the configured type.

        With type 'stylesheets', 'app' resolves to 'app.css' even when an
        'app.js' is also on the paths.
        """
        env = self.compiled()
        ext = TYPE_EXTENSIONS.get(str(self.type))
        if ext and not logical_name.endswith(ext):
            asset = env.lookup(logical_name + ext)
            if asset is not None:
                return asset
        return env.lookup(logical_name)

    def _qualify(self, path: str) -> str:
        if self.directory:
            return self.directory + "/" + path
        return path

    def write(self, logical_name: str, path: str | None = None, gzip: bool = False) -> str | None:
        """Write the compiled asset under a content-hashed name.

        Returns the hashed name ('app-<sha1>.js'), not the full path, or None
        when the asset cannot be found. With 'gzip', a '.gz' copy is written
        next to the plain file. Write errors propagate.
        """
        asset = self.lookup(logical_name)
        if asset is None:
            logger.warning("asset %r not found", logical_name)
            return None

        source = str(asset)
        digest = hashlib.sha1(source.encode("utf-8")).hexdigest()
        stem, ext = posixpath.splitext(asset.logical_path)
        name = f"{stem}-{digest}{ext}"

        target_dir = self._target_directory(path)
        full_path = target_dir + "/" + name if target_dir else name

        asset.write_to(full_path)
        if gzip:
            asset.write_to(full_path + ".gz", compress=True)
        logger.info("wrote %s as %s", logical_name, full_path)
        return name

    def _target_directory(self, path: str | None) -> str:
        if path:
            if posixpath.isabs(path):
                return path
            return self._qualify(path)
        return self.directory or ""

    @property
    def pattern(self) -> Pattern[str]:
        """Directive regex for the current delimiters and asset type."""
        return compile_pattern(self.options["src_pre"], self.options["src_post"], str(self.type))

    def rewrite(self, text: str) -> str:
        """Return 'text' with every asset directive substituted."""
        return substitute(self.pattern, text, self)

    def rewrite_inplace(self, buffer: io.StringIO) -> None:
        """Substitute directives in 'buffer', replacing its contents."""
        result = self.rewrite(buffer.getvalue())
        buffer.seek(0)
        buffer.truncate()
        buffer.write(result)

    def rewrite_stream(self, src: TextIO, dst: TextIO) -> None:
        dst.write(self.rewrite(src.read()))

    def rewrite_file(self, path: str | Path, output: str | Path | None = None) -> None:
        """Rewrite a template file in place, or into 'output' when given."""
        with open(path, "r", encoding="utf-8") as f:
            text = f.read()
        result = self.rewrite(text)
        with open(output or path, "w", encoding="utf-8") as f:
            f.write(result)
