"""
Unit tests for translation resolution.

Tests focus on:
- Dotted key traversal
- Fallback to the default language, then to the key
- Literal sequential parameter substitution
- Catalog immutability
"""
import pytest

from core.i18n import (
    DEFAULT_LANG,
    available_languages,
    has_key,
    is_supported,
    normalize_language,
    resolve,
)
from core.translations import TRANSLATIONS, freeze_catalog


CATALOGS = freeze_catalog({
    "fr": {
        "greeting": "Bonjour {name}",
        "home": {"title": "Accueil", "only_fr": "Seulement en français"},
        "deep": {"a": {"b": {"c": "profond"}}},
    },
    "en": {
        "greeting": "Hello {name}",
        "home": {"title": "Home"},
    },
})


def _flatten(tree, prefix=""):
    for key, value in tree.items():
        path = f"{prefix}{key}"
        if isinstance(value, str):
            yield path
        else:
            yield from _flatten(value, path + ".")


class TestLookup:
    """Tests for dotted key traversal"""

    def test_nested_key(self):
        """Every segment resolves down to a string leaf"""
        assert resolve("deep.a.b.c", "fr", catalogs=CATALOGS) == "profond"

    def test_language_specific_value(self):
        assert resolve("home.title", "en", catalogs=CATALOGS) == "Home"
        assert resolve("home.title", "fr", catalogs=CATALOGS) == "Accueil"

    def test_subtree_is_not_a_translation(self):
        """A key pointing at a nested mapping is treated as missing"""
        assert resolve("home", "fr", catalogs=CATALOGS) == "home"

    def test_path_through_a_leaf(self):
        """Traversal past a string leaf is a miss"""
        assert resolve("greeting.extra", "fr", catalogs=CATALOGS) == "greeting.extra"

    def test_empty_segment(self):
        assert resolve("deep..c", "fr", catalogs=CATALOGS) == "deep..c"

    def test_real_catalog_home_title(self):
        assert resolve("home.title", "fr") == TRANSLATIONS["fr"]["home"]["title"]


class TestFallback:
    """Tests for default-language and raw-key fallbacks"""

    def test_missing_everywhere_returns_key(self):
        """Keys absent from every catalog come back verbatim"""
        for lang in ("fr", "en"):
            assert resolve("nope.not.here", lang, catalogs=CATALOGS) == "nope.not.here"

    def test_missing_in_english_uses_french(self):
        assert resolve("home.only_fr", "en", catalogs=CATALOGS) == "Seulement en français"

    def test_real_catalog_fallback(self):
        """verification.methodology only exists in the French catalog"""
        assert not has_key("verification.methodology", "en")
        assert resolve("verification.methodology", "en") == TRANSLATIONS["fr"]["verification"]["methodology"]

    def test_empty_english_value_uses_french(self):
        """An empty string counts as a missing translation"""
        catalogs = {"fr": {"a": "Bonjour"}, "en": {"a": ""}}
        assert resolve("a", "en", catalogs=catalogs) == "Bonjour"
        assert not has_key("a", "en", catalogs)

    def test_empty_french_value_returns_key(self):
        catalogs = {"fr": {"a": {"b": ""}}, "en": {}}
        assert resolve("a.b", "fr", catalogs=catalogs) == "a.b"
        assert resolve("a.b", "en", catalogs=catalogs) == "a.b"

    def test_unsupported_language_uses_default(self):
        assert resolve("home.title", "xx", catalogs=CATALOGS) == "Accueil"

    def test_non_string_key(self):
        assert resolve(None, "fr", catalogs=CATALOGS) == "None"

    def test_every_english_key_exists_in_french(self):
        """The default catalog covers every key of the other languages"""
        for key in _flatten(TRANSLATIONS["en"]):
            assert has_key(key, DEFAULT_LANG), key


class TestInterpolation:
    """Tests for {token} substitution"""

    def test_single_param(self):
        assert resolve("greeting", "en", {"name": "Alice"}, catalogs=CATALOGS) == "Hello Alice"

    def test_value_is_stringified(self):
        assert resolve("greeting", "fr", {"name": 42}, catalogs=CATALOGS) == "Bonjour 42"

    def test_every_occurrence_is_replaced(self):
        catalogs = {"fr": {"x": "{a} et {a}"}}
        assert resolve("x", "fr", {"a": "1"}, catalogs=catalogs) == "1 et 1"

    def test_unknown_token_left_untouched(self):
        assert resolve("greeting", "fr", {"other": "x"}, catalogs=CATALOGS) == "Bonjour {name}"

    def test_substitution_is_sequential(self):
        """A substituted value containing a token is replaced by a later entry"""
        catalogs = {"fr": {"x": "{a}-{b}"}}
        assert resolve("x", "fr", {"a": "{b}", "b": "B"}, catalogs=catalogs) == "B-B"
        assert resolve("x", "fr", {"b": "B", "a": "{b}"}, catalogs=catalogs) == "{b}-B"

    def test_missing_key_is_not_interpolated(self):
        assert resolve("missing.{name}", "fr", {"name": "x"}, catalogs=CATALOGS) == "missing.{name}"

    def test_idempotent(self):
        first = resolve("home.welcome", "en", {"name": "Bob"})
        second = resolve("home.welcome", "en", {"name": "Bob"})
        assert first == second == "Hello Bob"


class TestCatalog:
    """Tests for catalog data and language helpers"""

    def test_catalog_is_read_only(self):
        with pytest.raises(TypeError):
            TRANSLATIONS["fr"]["nav"]["home"] = "changed"
        with pytest.raises(TypeError):
            TRANSLATIONS["de"] = {}

    def test_freeze_is_a_copy(self):
        source = {"fr": {"a": "1"}}
        frozen = freeze_catalog(source)
        source["fr"]["a"] = "2"
        assert frozen["fr"]["a"] == "1"

    def test_available_languages(self):
        assert available_languages() == [("fr", "Français"), ("en", "English")]

    def test_supported_codes(self):
        assert is_supported("fr") and is_supported("en")
        assert not is_supported("xx")
        assert not is_supported(None)
        assert normalize_language("en") == "en"
        assert normalize_language("EN") == DEFAULT_LANG
