"""
Route pattern tests.

Covers parsing, matching and building of the pattern DSL:
literals, <params>, constraints, defaults and nested optional groups.

Run with: pytest tests/test_pattern.py -v
"""

import pytest

from storefront.routing.pattern import (
    Literal,
    OptionalGroup,
    Param,
    PatternSyntaxError,
    RoutePattern,
    decode_path,
    parse,
    tokenize,
)


# ────────────────────────────────────────────────────────────────
# Parsing
# ────────────────────────────────────────────────────────────────

class TestParse:
    """Pattern text -> node tree."""

    def test_tokenize_splits_params_and_groups(self):
        """Brackets and params become their own tokens."""
        assert tokenize("blog[/<slug>]") == [
            ("text", "blog"),
            ("open", "["),
            ("text", "/"),
            ("param", "slug"),
            ("close", "]"),
        ]

    def test_param_forms(self):
        """Name, constraint and default are parsed from <...>."""
        nodes = parse(r"<id \d+>/<lang=cs>/<page=1 \d+>/<slug>")
        params = [node for node in nodes if isinstance(node, Param)]
        assert params == [
            Param("id", r"\d+", None),
            Param("lang", None, "cs"),
            Param("page", r"\d+", "1"),
            Param("slug", None, None),
        ]

    def test_nested_optional_groups(self):
        nodes = parse("a[/<b>[/<c>]]")
        assert nodes[0] == Literal("a")
        outer = nodes[1]
        assert isinstance(outer, OptionalGroup)
        assert isinstance(outer.children[-1], OptionalGroup)

    @pytest.mark.parametrize(
        "source",
        ["blog[/<slug>", "blog]/x", "<slug", "a>b", "<1bad>", "<a>/<a>", r"<id (\d+>"],
    )
    def test_malformed_patterns_raise(self, source):
        """Unbalanced brackets, bad names, duplicates and bad regexes are rejected."""
        with pytest.raises(PatternSyntaxError):
            RoutePattern(source)

    def test_error_carries_pattern(self):
        with pytest.raises(PatternSyntaxError) as exc_info:
            RoutePattern("blog[")
        assert exc_info.value.pattern == "blog["
        assert "blog[" in str(exc_info.value)


# ────────────────────────────────────────────────────────────────
# Matching
# ────────────────────────────────────────────────────────────────

class TestMatch:
    """RoutePattern.match on relative paths."""

    def test_literal_match(self):
        pattern = RoutePattern("kontakt")
        assert pattern.match("kontakt") == {}
        assert pattern.match("kontakty") is None

    def test_trailing_slash_is_optional(self):
        """'kontakt/' matches 'kontakt' and 'en' matches '[<lang>/]'."""
        assert RoutePattern("kontakt").match("kontakt/") == {}
        assert RoutePattern("[<lang en|de>/]").match("en") == {"lang": "en"}

    def test_default_constraint_is_one_segment(self):
        pattern = RoutePattern("produkty/<slug>")
        assert pattern.match("produkty/ruze") == {"slug": "ruze"}
        assert pattern.match("produkty/ruze/cervena") is None

    def test_constraint_is_enforced(self):
        """<id \\d+> rejects non-digits."""
        pattern = RoutePattern(r"produkt/<id \d+>")
        assert pattern.match("produkt/42") == {"id": "42"}
        assert pattern.match("produkt/abc") is None

    def test_optional_group_absent(self):
        pattern = RoutePattern("blog[/<slug>]")
        assert pattern.match("blog") == {"slug": None}
        assert pattern.match("blog/hello") == {"slug": "hello"}

    def test_empty_pattern_matches_root(self):
        assert RoutePattern("").match("") == {}
        assert RoutePattern("").match("x") is None

    def test_decode_path_keeps_slash_and_percent_encoded(self):
        assert decode_path("produkty/r%C5%AF%C5%BEe") == "produkty/růže"
        assert decode_path("produkty/a%2Fb") == "produkty/a%2Fb"
        assert decode_path("produkty/100%25") == "produkty/100%25"

    def test_captures_are_unescaped(self):
        pattern = RoutePattern("produkty/<slug>")
        assert pattern.match(decode_path("produkty/a%2Fb")) == {"slug": "a/b"}

    def test_literal_percent_sign(self):
        pattern = RoutePattern("sleva-50%")
        assert pattern.match(decode_path("sleva-50%25")) == {}
        assert pattern.build({}, {}) == "sleva-50%25"


# ────────────────────────────────────────────────────────────────
# Building
# ────────────────────────────────────────────────────────────────

class TestBuild:
    """RoutePattern.build renders relative paths or None."""

    def test_required_param(self):
        assert RoutePattern("produkty/<slug>").build({"slug": "ruze"}, {}) == "produkty/ruze"

    def test_missing_required_param_is_unbuildable(self):
        assert RoutePattern("produkty/<slug>").build({}, {}) is None

    def test_constraint_violation_is_unbuildable(self):
        assert RoutePattern(r"produkt/<id \d+>").build({"id": "abc"}, {}) is None

    def test_required_param_falls_back_to_default(self):
        assert RoutePattern("page/<n=1>").build({}, {}) == "page/1"

    def test_optional_group_omitted_for_default_value(self):
        """A group is rendered only when a value differs from its default."""
        pattern = RoutePattern("[<lang=cs cs|en>/]kontakt")
        assert pattern.build({"lang": "cs"}, {}) == "kontakt"
        assert pattern.build({"lang": "en"}, {}) == "en/kontakt"

    def test_optional_group_uses_route_defaults(self):
        pattern = RoutePattern("[<lang en|de>/]kontakt")
        assert pattern.build({"lang": "cs"}, {"lang": "cs"}) == "kontakt"

    def test_values_are_percent_encoded(self):
        assert RoutePattern("hledat/<q>").build({"q": "růže a tulipány"}, {}) == (
            "hledat/r%C5%AF%C5%BEe%20a%20tulip%C3%A1ny"
        )

    def test_built_path_matches_back(self):
        pattern = RoutePattern(r"clanek/<id \d+>[/<slug>]")
        path = pattern.build({"id": "7", "slug": "jarni-kytice"}, {})
        assert path == "clanek/7/jarni-kytice"
        assert pattern.match(path) == {"id": "7", "slug": "jarni-kytice"}
