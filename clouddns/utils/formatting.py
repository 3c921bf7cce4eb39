"""
Record value formatting helpers.

Zone-file notation helpers shared by the provider formatters: quoting of TXT
strings, trailing-dot FQDNs and the token layouts of MX, SRV and CAA values.
All functions are pure.
"""

import re
from typing import Any, Mapping, Optional, Tuple

DEFAULT_MX_PRIORITY = 10
CAA_TAGS = ("issue", "issuewild", "iodef")
SRV_FIELDS = ("priority", "weight", "port")

_MX_RE = re.compile(r"^(\d+)\s+(.+)$")
_SRV_RE = re.compile(r"^(\d+)\s+(\d+)\s+(\d+)\s+(.+)$")
_CAA_RE = re.compile(r"^(\d+)\s+(issue|issuewild|iodef)\s+\"(.+)\"$", re.IGNORECASE)
_TXT_SEGMENT_RE = re.compile(r'"((?:[^"\\]|\\.)*)"')


def ensure_trailing_dot(name: str) -> str:
    """Return name as an absolute FQDN ending with a dot."""
    return name if name.endswith(".") else f"{name}."


def strip_trailing_dot(name: str) -> str:
    return name[:-1] if name.endswith(".") and name != "." else name


def is_quoted(value: str) -> bool:
    return len(value) >= 2 and value.startswith('"') and value.endswith('"')


def quote_txt(value: str) -> str:
    """Wrap a TXT value in double quotes, escaping embedded quotes."""
    if is_quoted(value):
        return value
    escaped = value.replace('"', '\\"')
    return f'"{escaped}"'


def unquote_txt(value: str) -> str:
    """
    Strip TXT quoting for display.

    Long TXT values come back as several quoted strings ("abc" "def"); they
    are joined into one string.
    """
    if not is_quoted(value):
        return value
    segments = _TXT_SEGMENT_RE.findall(value)
    if not segments:
        return value[1:-1]
    return "".join(segment.replace('\\"', '"') for segment in segments)


def split_mx(value: str) -> Tuple[Optional[int], str]:
    """Split '10 mail.example.com' into (10, 'mail.example.com')."""
    match = _MX_RE.match(value.strip())
    if match:
        return int(match.group(1)), match.group(2).strip()
    return None, value.strip()


def format_mx(value: str, priority: Optional[int] = None) -> str:
    """Render an MX value as '<priority> <host>.'."""
    parsed_priority, host = split_mx(value)
    if priority is None:
        priority = parsed_priority if parsed_priority is not None else DEFAULT_MX_PRIORITY
    return f"{priority} {ensure_trailing_dot(host)}"


def split_srv(value: str) -> Optional[Tuple[int, int, int, str]]:
    """Split 'priority weight port target', or None when malformed."""
    match = _SRV_RE.match(value.strip())
    if not match:
        return None
    return (
        int(match.group(1)),
        int(match.group(2)),
        int(match.group(3)),
        match.group(4).strip(),
    )


def format_srv(value: str) -> str:
    parts = split_srv(value)
    if parts is None:
        return value
    priority, weight, port, target = parts
    return f"{priority} {weight} {port} {ensure_trailing_dot(target)}"


def split_caa(value: str) -> Tuple[int, str, str]:
    """
    Split a CAA value into (flags, tag, value).

    A bare domain such as 'letsencrypt.org' means '0 issue "letsencrypt.org"'.
    """
    value = value.strip()
    match = _CAA_RE.match(value)
    if match:
        return int(match.group(1)), match.group(2).lower(), match.group(3)
    if " " not in value:
        return 0, "issue", value.strip('"')
    tokens = value.split(None, 2)
    if len(tokens) == 3 and tokens[0].isdigit():
        return int(tokens[0]), tokens[1].lower(), tokens[2].strip('"')
    return 0, "issue", value


def format_caa(value: str) -> str:
    if _CAA_RE.match(value.strip()):
        return value.strip()
    if " " not in value.strip():
        return f'0 issue "{value.strip()}"'
    return value


def fold_extras(record_type: str, value: str, extras: Optional[Mapping[str, Any]] = None) -> str:
    """
    Fold priority/weight/port/flags/tag options into a token-style value.

    'sip.example.com' with priority 10, weight 5 and port 5060 becomes
    '10 5 5060 sip.example.com'. Values that already carry their tokens are
    left alone, except that an explicit option overrides the parsed one.
    """
    record_type = record_type.upper()
    value = value.strip()
    extras = extras or {}

    if record_type == "MX" and extras.get("priority") is not None:
        return f"{extras['priority']} {split_mx(value)[1]}"
    if record_type == "SRV" and len(value.split()) == 1:
        if all(extras.get(key) is not None for key in SRV_FIELDS):
            return f"{extras['priority']} {extras['weight']} {extras['port']} {value}"
    if record_type == "CAA" and (extras.get("tag") or extras.get("flags") is not None):
        flags, tag, inner = split_caa(value)
        flags = extras["flags"] if extras.get("flags") is not None else flags
        return f'{flags} {extras.get("tag") or tag} "{inner}"'
    return value


def to_zone_file(record_type: str, value: str) -> str:
    """Encode a user value into zone-file notation for the given type."""
    record_type = record_type.upper()
    if record_type == "TXT":
        return quote_txt(value)
    if record_type in ("CNAME", "NS", "PTR"):
        return ensure_trailing_dot(value.strip())
    if record_type == "MX":
        return format_mx(value)
    if record_type == "SRV":
        return format_srv(value)
    if record_type == "CAA":
        return format_caa(value)
    return value.strip()


def from_zone_file(record_type: str, value: str) -> str:
    """Turn a zone-file value into a display value."""
    record_type = record_type.upper()
    if record_type == "TXT":
        return unquote_txt(value)
    if record_type in ("CNAME", "NS", "PTR"):
        return strip_trailing_dot(value)
    if record_type == "MX":
        priority, host = split_mx(value)
        host = strip_trailing_dot(host)
        return host if priority is None else f"{priority} {host}"
    if record_type == "SRV":
        parts = split_srv(value)
        if parts is None:
            return value
        priority, weight, port, target = parts
        return f"{priority} {weight} {port} {strip_trailing_dot(target)}"
    return value


def truncate_value(value: str, max_length: int = 60) -> str:
    """Shorten long values for table display."""
    if len(value) > max_length:
        return value[: max_length - 3] + "..."
    return value
