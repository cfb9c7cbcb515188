"""Language Strings tests: locale negotiation and message formatting.

Tests cover:
    - Every locale defines the same message codes
    - Accept-Language negotiation honors q values and region subtags
    - Unknown codes and missing params fall back to the English message
"""

from hrms.core.domain_types import Locale
from hrms.core.errors import InsufficientBalanceError, ResourceNotFoundError
from hrms.core.language_strings import MESSAGES, localize, resolve_locale


def test_locales_share_message_codes():
    assert set(MESSAGES[Locale.EN]) == set(MESSAGES[Locale.IT])


def test_every_locale_has_a_catalog():
    assert set(MESSAGES) == set(Locale)


def test_missing_header_uses_default():
    assert resolve_locale(None) == Locale.EN
    assert resolve_locale("", "it") == Locale.IT


def test_region_subtag_is_ignored():
    assert resolve_locale("it-IT,it;q=0.9") == Locale.IT


def test_highest_quality_supported_tag_wins():
    assert resolve_locale("fr;q=1.0, en;q=0.5, it;q=0.8") == Locale.IT


def test_zero_quality_is_excluded():
    assert resolve_locale("it;q=0, en;q=0.1") == Locale.EN


def test_unsupported_languages_fall_back_to_default():
    assert resolve_locale("de-DE, fr", "it") == Locale.IT


def test_unknown_default_falls_back_to_english():
    assert resolve_locale(None, "xx") == Locale.EN


def test_localize_interpolates_params():
    error = ResourceNotFoundError("employee", "42")
    assert localize(error.code, Locale.IT, error.message, **error.params) == "employee non trovato"


def test_localize_unknown_code_uses_fallback():
    assert localize("NOT_A_CODE", Locale.IT, "fallback") == "fallback"


def test_localize_missing_params_uses_fallback():
    assert localize("RESOURCE_NOT_FOUND", Locale.EN, "fallback") == "fallback"


def test_balance_error_message_carries_numbers():
    error = InsufficientBalanceError("vacation", 3, 5)
    message = localize(error.code, Locale.EN, error.message, **error.params)
    assert "3" in message and "5" in message
