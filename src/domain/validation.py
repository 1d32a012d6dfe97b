"""
Validation layer - Structural checks on registration requests.

URL hosts follow the WHATWG URL host parser: special-scheme hosts are
percent-decoded, IDNA-encoded and checked for forbidden code points, and a
host whose last label is numeric must be a valid IPv4 address.
"""

import ipaddress
import re
from urllib.parse import unquote, urlsplit

from .exceptions import ValidationError
from .models import Metadata

MIN_NAME_LENGTH = 3
MAX_NAME_LENGTH = 64

UNENCODABLE_REASON = "must be encodable as UTF-8"

_SCHEME_RE = re.compile(r"^[A-Za-z][A-Za-z0-9+.\-]*$")
# Schemes whose URLs must name a host
_SPECIAL_SCHEMES = frozenset({"http", "https", "ftp", "ws", "wss"})

_FORBIDDEN_HOST_CHARS = frozenset("\x00\t\n\r #/:<>?@[\\]^|")
_FORBIDDEN_DOMAIN_CHARS = _FORBIDDEN_HOST_CHARS | frozenset("%\x7f") | frozenset(map(chr, range(0x20)))

_IPV4_DIGITS = {8: "01234567", 10: "0123456789", 16: "0123456789abcdefABCDEF"}

_INVALID_URL = "must be a valid URL"


def encodes_as_utf8(text: str) -> bool:
    """False for strings holding lone surrogates, which no store key can represent."""
    try:
        text.encode("utf-8")
    except UnicodeEncodeError:
        return False
    return True


def validate_name(name: str) -> str | None:
    """Return the reason name is invalid, or None."""
    if not encodes_as_utf8(name):
        return UNENCODABLE_REASON
    if not MIN_NAME_LENGTH <= len(name) <= MAX_NAME_LENGTH:
        return f"length must be between {MIN_NAME_LENGTH} and {MAX_NAME_LENGTH} characters"
    return None


def _parse_ipv4_number(part: str) -> int | None:
    if not part:
        return None
    if part[:2].lower() == "0x":
        digits, base = part[2:], 16
    elif len(part) > 1 and part.startswith("0"):
        digits, base = part[1:], 8
    else:
        digits, base = part, 10
    # "0x" alone is zero
    if not digits:
        return 0
    if any(ch not in _IPV4_DIGITS[base] for ch in digits):
        return None
    return int(digits, base)


def _ends_in_number(host: str) -> bool:
    labels = host.split(".")
    if labels[-1] == "" and len(labels) > 1:
        labels.pop()
    last = labels[-1]
    if last and last.isdigit():
        return True
    return _parse_ipv4_number(last) is not None and last[:2].lower() == "0x"


def _valid_ipv4(host: str) -> bool:
    parts = host.split(".")
    if parts[-1] == "" and len(parts) > 1:
        parts.pop()
    if len(parts) > 4 or any(part == "" for part in parts):
        return False
    numbers = [_parse_ipv4_number(part) for part in parts]
    if any(number is None for number in numbers):
        return False
    if any(number > 255 for number in numbers[:-1]):
        return False
    return numbers[-1] < 256 ** (5 - len(numbers))


def _valid_special_host(raw_host: str) -> bool:
    if raw_host.startswith("["):
        if not raw_host.endswith("]") or "%" in raw_host:
            return False
        try:
            ipaddress.IPv6Address(raw_host[1:-1])
        except ValueError:
            return False
        return True

    try:
        host = unquote(raw_host, errors="strict")
    except UnicodeDecodeError:
        return False
    if not host:
        return False
    if not host.isascii():
        try:
            host = host.encode("idna").decode("ascii")
        except UnicodeError:
            return False
    host = host.lower()
    if any(ch in _FORBIDDEN_DOMAIN_CHARS for ch in host):
        return False
    if _ends_in_number(host):
        return _valid_ipv4(host)
    return True


def _valid_opaque_host(raw_host: str) -> bool:
    if raw_host.startswith("["):
        try:
            ipaddress.IPv6Address(raw_host[1:-1])
        except ValueError:
            return False
        return raw_host.endswith("]")
    return not any(ch in _FORBIDDEN_HOST_CHARS for ch in raw_host)


def validate_url(url: str) -> str | None:
    """Return the reason url is not a valid absolute URL, or None."""
    if not url or any(ch.isspace() for ch in url):
        return _INVALID_URL
    try:
        parts = urlsplit(url)
        # Accessing port parses it and rejects non-numeric values
        parts.port
    except ValueError:
        return _INVALID_URL
    if not parts.scheme or not _SCHEME_RE.match(parts.scheme):
        return _INVALID_URL
    if not (parts.netloc or parts.path):
        return _INVALID_URL

    # Host without userinfo or port; the port was checked above
    hostport = parts.netloc.rpartition("@")[2]
    if hostport.startswith("["):
        raw_host = hostport[: hostport.find("]") + 1]
    else:
        raw_host = hostport.partition(":")[0]

    if parts.scheme.lower() in _SPECIAL_SCHEMES:
        if not _valid_special_host(raw_host):
            return _INVALID_URL
    elif raw_host and not _valid_opaque_host(raw_host):
        return _INVALID_URL
    return None


def validate_registration(name: str, metadata: Metadata) -> None:
    """
    Check a registration request's name and metadata.

    Raises:
        ValidationError: Reporting the first violated field, with every
            violation listed in ``errors``
    """
    errors: list[tuple[str, str]] = []

    reason = validate_name(name)
    if reason is not None:
        errors.append(("name", reason))

    if metadata.url is not None:
        reason = validate_url(metadata.url)
        if reason is not None:
            errors.append(("metadata.url", reason))

    if errors:
        field, reason = errors[0]
        raise ValidationError(field, reason, errors)
