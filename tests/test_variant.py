"""Tests for template asset selection."""
import pytest

from rwcli.scaffold.errors import AssetNotFound
from rwcli.scaffold.release import AssetDescriptor
from rwcli.scaffold.variant import cache_key, select_asset, template_asset_name, track_name


class TestAssetNaming:
    """Test asset name and cache key composition."""

    def test_typescript_arapaho(self):
        """v3.2.0 + typescript + arapaho resolves to the documented names."""
        name = template_asset_name(track_name(bighorn=False), typescript=True)
        assert name == "arapaho_ts.zip"
        assert cache_key("v3.2.0", name) == "v3.2.0_arapaho_ts.zip"

    def test_javascript_bighorn(self):
        assert template_asset_name(track_name(bighorn=True), typescript=False) == "bighorn_js.zip"

    def test_same_inputs_same_key(self):
        first = cache_key("v3.2.0", template_asset_name("arapaho", True))
        second = cache_key("v3.2.0", template_asset_name("arapaho", True))
        assert first == second

    def test_new_release_gets_new_key(self):
        name = template_asset_name("arapaho", True)
        assert cache_key("v3.2.0", name) != cache_key("v3.3.0", name)

    def test_path_separators_in_tag_encoded(self):
        name = template_asset_name("arapaho", True)
        key = cache_key("release/3.2.0", name)

        assert key == "release%2F3.2.0_arapaho_ts.zip"
        assert "\\" not in cache_key("release\\3.2.0", name)
        # A tag that already looks encoded must not collide
        assert key != cache_key("release%2F3.2.0", name)

    def test_unknown_track_rejected(self):
        with pytest.raises(ValueError, match="Unknown template track"):
            template_asset_name("cheyenne", True)


class TestSelectAsset:
    """Test exact-name asset matching."""

    ASSETS = [
        AssetDescriptor(name="arapaho_js.zip", id=1),
        AssetDescriptor(name="arapaho_ts.zip", id=2),
    ]

    def test_exact_match(self):
        assert select_asset(self.ASSETS, "arapaho_ts.zip").id == 2

    def test_match_is_case_sensitive(self):
        with pytest.raises(AssetNotFound):
            select_asset(self.ASSETS, "Arapaho_TS.zip", "v3.2.0")

    def test_missing_asset_names_expected_asset_and_tag(self):
        with pytest.raises(AssetNotFound) as exc_info:
            select_asset(self.ASSETS, "bighorn_ts.zip", "v3.2.0")

        error = exc_info.value
        assert error.asset_name == "bighorn_ts.zip"
        assert error.release_tag == "v3.2.0"
        assert "bighorn_ts.zip" in str(error)
        assert "v3.2.0" in str(error)
        assert "arapaho_ts.zip" in str(error)

    def test_empty_release(self):
        with pytest.raises(AssetNotFound):
            select_asset([], "arapaho_ts.zip")
