"""Slug normalization for vehicle titles and location names.

``slugify`` is pure and deterministic: the same text always yields the
same slug, and every result matches ``SLUG_PATTERN``.

    >>> slugify("Onix 1.0 Turbo")
    'onix-10-turbo'
    >>> slugify("São Paulo-SP")
    'sao-paulo-sp'
"""

import re

from slugify import slugify as python_slugify

from autolisting.modules.urls.vocabulary import SLUG_SUBSTITUTIONS

SLUG_PATTERN = re.compile(r"^[a-z0-9]+(?:-[a-z0-9]+)*$")

# Returned when nothing in the input survives normalization.
PLACEHOLDER_SLUG = "sem-titulo"

_DIGIT_DOT_DIGIT = re.compile(r"(\d)\.(\d)")
_WHITESPACE = re.compile(r"\s+")

# Plain \b edges: an entry ending in punctuation ("GM-") only fires when a
# word follows it directly.
_SUBSTITUTIONS = tuple(
    (re.compile(rf"\b{re.escape(source)}\b", re.IGNORECASE), target)
    for source, target in SLUG_SUBSTITUTIONS
)


def prepare_title(text: str) -> str:
    """Rewrite raw text before the final slug pass.

    1. "1.0" -> "10" (engine displacement stays one token)
    2. "/" -> "-"
    3. remaining "." -> "-"
    4. vocabulary substitutions (whole words, case-insensitive)
    5. collapse whitespace
    """
    processed = _DIGIT_DOT_DIGIT.sub(r"\1\2", text)
    processed = processed.replace("/", "-")
    processed = processed.replace(".", "-")

    for pattern, replacement in _SUBSTITUTIONS:
        processed = pattern.sub(lambda _match, value=replacement: value, processed)

    return _WHITESPACE.sub(" ", processed).strip()


def normalize_slug(value: str) -> str:
    """Lowercase, strip diacritics, hyphenate non-alphanumeric runs.

    Does not apply the vocabulary table; use it for slugs typed by users.
    May return an empty string.
    """
    return python_slugify(value, lowercase=True, separator="-")


def slugify(text: str | None) -> str:
    """Convert arbitrary text into a url-safe slug."""
    slug = normalize_slug(prepare_title(text or ""))
    return slug or PLACEHOLDER_SLUG


def is_valid_slug(value: str) -> bool:
    """Check lowercase ASCII tokens joined by single hyphens."""
    return bool(SLUG_PATTERN.fullmatch(value))
