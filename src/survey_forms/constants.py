"""Constants shared across the survey_forms SDK.

Locale settings can be overridden via environment variables so that
deployments can change the default language without code changes.
"""

import os

# Metadata key carried by every table row object in nested form values.
# It holds the human-assigned row name and is never stored as an answer.
ROW_LABEL_KEY = "_rowLabel"

# Prefix of the synthetic row key used when a table row has no label.
ROW_KEY_PREFIX = "row_"

# Content type marking a repeatable-row container question.
TABLE_CONTENT_TYPE = "table"

# Locales that have label columns in the question schema import.
SUPPORTED_LOCALES: tuple[str, ...] = ("fr", "en")

# Fallback locale when the caller sends none or an unsupported one.
DEFAULT_LOCALE = os.getenv("SURVEY_DEFAULT_LOCALE", "fr")

# Lifetime of the locale cookie set by the HTTP layer (one year).
LOCALE_COOKIE_NAME = "locale"
LOCALE_COOKIE_MAX_AGE = 60 * 60 * 24 * 365
