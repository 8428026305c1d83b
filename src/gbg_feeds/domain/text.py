"""Text helpers shared by parsers and publishers."""

import re
import unicodedata

_NON_ALNUM = re.compile(r"[^a-z0-9]+")


def slugify(text: str) -> str:
    """Turn a display name into a lowercase ASCII key.

    >>> slugify("Chalmers, Göteborg")
    'chalmers-goteborg'
    """
    ascii_text = unicodedata.normalize("NFKD", text).encode("ascii", "ignore").decode("ascii")
    return _NON_ALNUM.sub("-", ascii_text.lower()).strip("-")
