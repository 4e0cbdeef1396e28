"""
Layered configuration tests.

Layers: common/{name}.yaml -> common/{name}.local.yaml -> shops/{text_id}/{name}.yaml

Run with: pytest tests/test_layered_config.py -v
"""

import pytest

from storefront.core.layered_config import (
    ConfigError,
    LayeredConfig,
    get_nested_value,
    merge_recursive,
)


@pytest.fixture
def layered(tmp_path, write_yaml):
    write_yaml(
        "common/app.yaml",
        """
site:
  name: VUK objekt
  email: obchod@vuk.cz
languages:
  default: cs
  supported: [cs, en, de]
""",
    )
    write_yaml("common/app.local.yaml", "site:\n  email: dev@localhost\n")
    write_yaml(
        "shops/florea/app.yaml",
        "site:\n  name: Florea\nlanguages:\n  supported: [cs]\n",
    )
    return LayeredConfig(tmp_path)


# ────────────────────────────────────────────────────────────────
# Merge helpers
# ────────────────────────────────────────────────────────────────

class TestMergeRecursive:

    def test_mappings_merge(self):
        merged = merge_recursive({"a": {"x": 1, "y": 2}}, {"a": {"y": 3}})
        assert merged == {"a": {"x": 1, "y": 3}}

    def test_lists_replace_wholesale(self):
        """Lists are never merged element-wise."""
        merged = merge_recursive({"langs": ["cs", "en", "de"]}, {"langs": ["cs"]})
        assert merged == {"langs": ["cs"]}

    def test_base_is_not_mutated(self):
        base = {"a": {"x": 1}}
        merge_recursive(base, {"a": {"x": 2}})
        assert base == {"a": {"x": 1}}

    def test_get_nested_value(self):
        data = {"a": {"b": {"c": 1}}}
        assert get_nested_value(data, "a.b.c") == 1
        assert get_nested_value(data, "a.x", "fallback") == "fallback"
        assert get_nested_value(data, "a.b.c.d") is None


# ────────────────────────────────────────────────────────────────
# LayeredConfig
# ────────────────────────────────────────────────────────────────

class TestLayeredConfig:

    def test_common_and_local_layers(self, layered):
        """Without a shop, only the common layers apply; .local overrides common."""
        assert layered.get("app.site.name") == "VUK objekt"
        assert layered.get("app.site.email") == "dev@localhost"

    def test_shop_layer_overrides(self, layered):
        florea = layered.for_shop("florea")
        assert florea.get("app.site.name") == "Florea"
        assert florea.get("app.site.email") == "dev@localhost"
        assert florea.get("app.languages.supported") == ["cs"]
        assert florea.get("app.languages.default") == "cs"

    def test_get_for_shop(self, layered):
        assert layered.get_for_shop("app.site.name", "florea") == "Florea"
        assert layered.get_for_shop("app.site.name", "velke-vence") == "VUK objekt"

    def test_missing_file_and_key_use_default(self, layered):
        assert layered.get("shops.domain_mapping", {}) == {}
        assert layered.get("app.nothing.here", 7) == 7

    def test_whole_file(self, layered):
        assert set(layered.get("app")) == {"site", "languages"}

    def test_returned_values_are_copies(self, layered):
        supported = layered.get("app.languages.supported")
        supported.append("xx")
        assert layered.get("app.languages.supported") == ["cs", "en", "de"]

    def test_cache_until_cleared(self, layered, write_yaml):
        assert layered.get("app.site.name") == "VUK objekt"
        write_yaml("common/app.yaml", "site:\n  name: Changed\n")
        assert layered.get("app.site.name") == "VUK objekt"

        layered.clear_cache()
        assert layered.get("app.site.name") == "Changed"

    def test_invalid_yaml_raises_config_error(self, tmp_path, write_yaml):
        path = write_yaml("common/broken.yaml", "a: [unclosed\n")
        with pytest.raises(ConfigError) as exc_info:
            LayeredConfig(tmp_path).get("broken.a")
        assert exc_info.value.path == path

    def test_non_mapping_file_raises_config_error(self, tmp_path, write_yaml):
        write_yaml("common/list.yaml", "- a\n- b\n")
        with pytest.raises(ConfigError, match="must contain a mapping"):
            LayeredConfig(tmp_path).get("list")
