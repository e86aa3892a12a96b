from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from typing import TYPE_CHECKING, Optional, Pattern

if TYPE_CHECKING:
    from .manager import AssetManager

logger = logging.getLogger(__name__)


class Directive:
    """Abstract base for an asset directive found in template text.

    Implementations resolve themselves against a manager; resolve returns the
    replacement text, or None when the asset could not be found.
    """
    name: str

    def resolve(self, manager: AssetManager) -> Optional[str]:
        raise NotImplementedError


@dataclass
class LinkDirective(Directive):
    """'<type> <name>': replaced by the hashed output file name."""
    name: str

    def resolve(self, manager: AssetManager) -> Optional[str]:
        return manager.write(self.name)


@dataclass
class InlineDirective(Directive):
    """'<type> inline <name>': replaced by the asset's content."""
    name: str

    def resolve(self, manager: AssetManager) -> Optional[str]:
        asset = manager.lookup(self.name)
        if asset is None:
            return None
        return str(asset)


def verb_pattern(asset_type: str) -> str:
    """Regex for the directive verb; 'javascripts' accepts 'javascript' too."""
    # 'css' and 'js' are not plurals; only words like 'javascripts' lose the 's'
    if len(asset_type) > 3 and asset_type.endswith("s") and not asset_type.endswith("ss"):
        return re.escape(asset_type[:-1]) + "s?"
    return re.escape(asset_type)


def compile_pattern(src_pre: str, src_post: str, asset_type: str) -> Pattern[str]:
    """Compile the directive regex for the given delimiters and asset type.

    The inline keyword must be followed by whitespace and a name, so names
    like 'inline_tracker' and a lone 'inline' are link directives.
    """
    return re.compile(
        re.escape(src_pre)
        + r"\s*"
        + verb_pattern(asset_type)
        + r"\s+(?:inline\s+(?P<inline>\S+?)|(?P<name>\S+?))\s*"
        + re.escape(src_post)
    )


def from_match(m: re.Match[str]) -> Directive:
    inline_name = m.group("inline")
    if inline_name is not None:
        return InlineDirective(name=inline_name)
    return LinkDirective(name=m.group("name"))


def substitute(pattern: Pattern[str], text: str, manager: AssetManager) -> str:
    """Replace every directive in 'text' in a single pass.

    Unresolved directives are left as written.
    """
    def _replace(m: re.Match[str]) -> str:
        directive = from_match(m)
        replacement = directive.resolve(manager)
        if replacement is None:
            logger.warning("unresolved asset directive %r left in place", m.group(0))
            return m.group(0)
        return replacement

    return pattern.sub(_replace, text)
