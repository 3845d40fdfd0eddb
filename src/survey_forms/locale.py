"""Locale resolution for label lookup."""

from survey_forms.constants import DEFAULT_LOCALE, SUPPORTED_LOCALES


def resolve_locale(raw: str | None) -> str:
    """Return a supported locale for ``raw``, falling back to the default.

    Matching is exact: ``"en"`` resolves to ``"en"``, ``"en-US"`` does not.
    """
    if raw and raw in SUPPORTED_LOCALES:
        return raw
    return DEFAULT_LOCALE
