"""Helpers shared by the rbac_auth models and API."""

import re
import unicodedata

from rbac_auth.conf import get_slug_separator

# Letters NFKD does not decompose into ASCII.
TRANSLITERATIONS = str.maketrans(
    {
        "ß": "ss",
        "Æ": "AE",
        "æ": "ae",
        "Œ": "OE",
        "œ": "oe",
        "Ø": "O",
        "ø": "o",
        "Đ": "D",
        "đ": "d",
        "Ð": "D",
        "ð": "d",
        "Ł": "L",
        "ł": "l",
        "Þ": "TH",
        "þ": "th",
        "ı": "i",
    }
)


def slugify(value, separator: str | None = None) -> str:
    """Normalize ``value`` into a slug joined by ``separator``.

    Non-ASCII characters are transliterated (or dropped), the "opposite" separator
    (``_`` for ``-`` and ``-`` otherwise) is turned into the separator, everything that
    is not a letter, a digit, whitespace or the separator is removed, and runs of
    whitespace and separators collapse into a single separator.

    Args:
        value: The value to normalize. Non-string values are converted with ``str``.
        separator: The separator to join words with. Defaults to the
            ``RBAC_AUTH_SLUG_SEPARATOR`` setting.

    Returns:
        str: The slug, possibly empty.

    Examples:
        >>> slugify("Create users")
        'create.users'
        >>> slugify("auth.users.create")
        'auth.users.create'
        >>> slugify("Super Admin", "-")
        'super-admin'
    """
    if separator is None:
        separator = get_slug_separator()

    value = str(value).translate(TRANSLITERATIONS)
    value = unicodedata.normalize("NFKD", value).encode("ascii", "ignore").decode("ascii")

    flip = "_" if separator == "-" else "-"
    sep = re.escape(separator)
    value = re.sub(rf"[{re.escape(flip)}]+", separator, value)
    value = re.sub(rf"[^{sep}a-zA-Z0-9\s]+", "", value.lower())
    value = re.sub(rf"[{sep}\s]+", separator, value)
    return value.strip(separator)


def get_key(obj_or_id):
    """Return the primary key of a model instance, or the value itself for raw ids."""
    return getattr(obj_or_id, "pk", obj_or_id)
