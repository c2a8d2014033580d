"""
Charset handling and application/x-www-form-urlencoded encoding.

Encoding follows the HTML form rules: ASCII alphanumerics and ``.-*_`` are
kept, a space becomes ``+`` and every other character is percent-encoded
from its bytes in the configured charset.
"""
import codecs
import logging
import re
from typing import Any, List, Mapping, Optional
from urllib.parse import quote_plus

from .errors import InvalidCharsetError

logger = logging.getLogger(__name__)

LOG_PREFIX = "[FormEncoding]"
DEFAULT_CHARSET = "utf-8"

# Codec names whose IANA registration differs from a plain upper-casing
IANA_CHARSETS = {
    "ascii": "US-ASCII",
    "utf-16-le": "UTF-16LE",
    "utf-16-be": "UTF-16BE",
    "utf-32-le": "UTF-32LE",
    "utf-32-be": "UTF-32BE",
    "shift_jis": "Shift_JIS",
    "euc_jp": "EUC-JP",
    "euc_kr": "EUC-KR",
    "iso2022_jp": "ISO-2022-JP",
    "koi8-r": "KOI8-R",
    "koi8-u": "KOI8-U",
    "big5": "Big5",
    "mac-roman": "macintosh",
}

_ISO_8859 = re.compile(r"^iso8859-(\d+)$")
_WINDOWS_CP = re.compile(r"^cp(125\d)$")


def normalize_charset(charset: Optional[str]) -> str:
    """Return the canonical codec name, raising InvalidCharsetError if unknown."""
    try:
        return codecs.lookup(charset).name
    except (LookupError, TypeError):
        raise InvalidCharsetError(str(charset)) from None


def form_urlencode(value: str, charset: str) -> str:
    """Percent-encode a single key or value.

    Raises UnicodeEncodeError when ``value`` has characters the charset
    cannot represent.
    """
    # quote_plus keeps "~" as unreserved, form encoding does not
    return quote_plus(value, safe="*", encoding=charset, errors="strict").replace("~", "%7E")


def encode_pairs(
    params: Mapping[Any, Any],
    charset: str,
    skip_empty_keys: bool = False,
) -> List[str]:
    """Encode a mapping into ``key=value`` strings in iteration order.

    Pairs that cannot be encoded are dropped rather than failing the whole
    mapping.
    """
    pairs: List[str] = []
    for raw_key, raw_value in params.items():
        key = "" if raw_key is None else str(raw_key)
        value = "" if raw_value is None else str(raw_value)

        if skip_empty_keys and not key:
            continue

        try:
            pairs.append(f"{form_urlencode(key, charset)}={form_urlencode(value, charset)}")
        except UnicodeEncodeError as e:
            logger.warning(
                f"{LOG_PREFIX} Dropping parameter {key!r}: not encodable as {charset} ({e.reason})"
            )
    return pairs


def wire_charset(charset: str) -> str:
    """IANA name for a codec, as used in a Content-Type charset parameter."""
    name = normalize_charset(charset)
    if name in IANA_CHARSETS:
        return IANA_CHARSETS[name]

    match = _ISO_8859.match(name)
    if match:
        return f"ISO-8859-{match.group(1)}"
    match = _WINDOWS_CP.match(name)
    if match:
        return f"windows-{match.group(1)}"
    return name.upper()
