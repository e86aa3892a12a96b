"""Global fixtures for assetmill tests."""

import hashlib
from unittest.mock import MagicMock

import pytest
import yaml

from assetmill.manager import AssetManager


CONFIG_YAML = """
options:
  js_compressor: uglify
  not_a_good_setting: some_value
paths:
  - assets/javascripts
  - other/javascripts
"""


@pytest.fixture
def config():
    """Parsed config with one recognized and one unrecognized option."""
    return yaml.safe_load(CONFIG_YAML)


@pytest.fixture
def manager():
    return AssetManager()


@pytest.fixture
def source():
    return "alert('test')"


@pytest.fixture
def hashed_name(source):
    """Expected output name for an 'app.js' asset with the sample source."""
    return f"app-{hashlib.sha1(source.encode('utf-8')).hexdigest()}.js"


@pytest.fixture
def make_asset():
    """Build an artifact double with the given content and logical path."""
    def _make(content, logical_path="app.js"):
        asset = MagicMock()
        asset.__str__.return_value = content
        asset.logical_path = logical_path
        return asset
    return _make


@pytest.fixture
def asset_tree(tmp_path):
    """Two source directories; 'app' exists in both, first one wins."""
    first = tmp_path / "assets" / "javascripts"
    second = tmp_path / "other" / "javascripts"
    (first / "vendor").mkdir(parents=True)
    second.mkdir(parents=True)
    (first / "app.js").write_text("alert('test')", encoding="utf-8")
    (second / "app.js").write_text("alert('shadowed')", encoding="utf-8")
    (second / "site.css").write_text("body { margin: 0 }", encoding="utf-8")
    (first / "vendor" / "tracking.js").write_text("alert('track');", encoding="utf-8")
    return tmp_path
