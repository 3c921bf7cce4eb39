"""
Validators - Input validation for DNS records

This module provides validation functions for zone names, record names,
record values and TTLs so bad input is rejected before any provider call.
"""

import ipaddress
import logging
import re
from typing import Iterable, Optional

import dns.exception
import dns.name
import dns.rdata
import dns.rdataclass
import dns.rdatatype

from .formatting import CAA_TAGS, to_zone_file

logger = logging.getLogger(__name__)

_LABEL_RE = re.compile(r"^[a-zA-Z0-9]([a-zA-Z0-9-]*[a-zA-Z0-9])?$")
_RECORD_LABEL_RE = re.compile(r"^[a-zA-Z0-9_]([a-zA-Z0-9_-]*[a-zA-Z0-9])?$")

# Types whose value syntax is checked by parsing it as zone-file rdata.
_RDATA_CHECKED_TYPES = ("CNAME", "NS", "PTR", "MX", "SRV", "CAA")


def validate_fqdn(fqdn: str) -> bool:
    """
    Validate Fully Qualified Domain Name (FQDN).

    Args:
        fqdn: The FQDN to validate

    Returns:
        True if valid, False otherwise
    """
    if not fqdn or not isinstance(fqdn, str):
        return False

    # Check for trailing dot (invalid in strict FQDN validation)
    if fqdn.endswith("."):
        logger.warning(f"FQDN ends with dot: {fqdn}")
        return False

    if len(fqdn) > 253:
        logger.warning(f"FQDN too long: {fqdn}")
        return False

    labels = fqdn.split(".")

    if len(labels) < 2:
        logger.warning(f"FQDN must have at least 2 labels: {fqdn}")
        return False

    if any(label == "" for label in labels):
        logger.warning(f"FQDN contains empty labels: {fqdn}")
        return False

    for label in labels:
        if len(label) > 63 or not _LABEL_RE.match(label):
            logger.warning(f"Invalid label '{label}' in FQDN: {fqdn}")
            return False

    return True


def validate_ipv4(ipv4: str) -> bool:
    """
    Validate IPv4 address.

    Args:
        ipv4: The IPv4 address to validate

    Returns:
        True if valid, False otherwise
    """
    if not ipv4 or not isinstance(ipv4, str):
        return False

    try:
        ipaddress.IPv4Address(ipv4.strip())
        return True
    except ipaddress.AddressValueError:
        logger.warning(f"Invalid IPv4 address: {ipv4}")
        return False


def validate_ipv6(ipv6: str) -> bool:
    """Validate IPv6 address."""
    if not ipv6 or not isinstance(ipv6, str):
        return False

    try:
        ipaddress.IPv6Address(ipv6.strip())
        return True
    except ipaddress.AddressValueError:
        logger.warning(f"Invalid IPv6 address: {ipv6}")
        return False


def validate_zone_name(zone: str) -> bool:
    """
    Validate DNS zone name.

    A single trailing dot is tolerated; zone names are compared without it.
    """
    if not zone or not isinstance(zone, str):
        return False

    zone = zone.strip()
    if zone.endswith("."):
        zone = zone[:-1]

    if not validate_fqdn(zone):
        return False

    # Zone names are never IP addresses
    try:
        ipaddress.ip_address(zone)
    except ValueError:
        return True
    return False


def validate_record_name(name: str) -> bool:
    """
    Validate a record name.

    Accepts "@" for the zone apex, relative or fully-qualified hostnames,
    a leading "*." wildcard, underscore labels (_dmarc, _sip._tcp) and a
    trailing dot.
    """
    if not name or not isinstance(name, str):
        return False

    name = name.strip()
    if name == "@":
        return True

    if name.startswith("*."):
        name = name[2:]
    if name.endswith("."):
        name = name[:-1]

    if not name or len(name) > 253:
        return False

    for label in name.split("."):
        if len(label) > 63 or not _RECORD_LABEL_RE.match(label):
            logger.warning(f"Invalid label '{label}' in record name: {name}")
            return False

    return True


def validate_record_type(record_type: str, supported: Iterable[str]) -> bool:
    if not record_type or not isinstance(record_type, str):
        return False
    return record_type.strip().upper() in supported


def validate_record_value(record_type: str, value: str) -> bool:
    """
    Validate a record value for its type.

    A/AAAA must be IP addresses of the right family. Hostname-bearing types
    are rendered to zone-file notation and parsed with dnspython, which
    catches malformed MX/SRV/CAA token layouts.
    """
    if not value or not isinstance(value, str) or not value.strip():
        return False

    record_type = record_type.upper()
    if record_type == "A":
        return validate_ipv4(value)
    if record_type == "AAAA":
        return validate_ipv6(value)
    if record_type not in _RDATA_CHECKED_TYPES:
        return True

    try:
        dns.rdata.from_text(
            dns.rdataclass.IN,
            dns.rdatatype.from_text(record_type),
            to_zone_file(record_type, value),
            origin=dns.name.root,
        )
        return True
    except (dns.exception.DNSException, ValueError) as e:
        logger.warning(f"Invalid {record_type} value '{value}': {e}")
        return False


def validate_ttl(ttl, minimum: int, maximum: int, auto: Optional[int] = None) -> bool:
    """Validate a TTL against a provider range; `auto` is an extra allowed sentinel."""
    try:
        ttl = int(ttl)
    except (TypeError, ValueError):
        return False

    if auto is not None and ttl == auto:
        return True
    return minimum <= ttl <= maximum


def validate_uint(value, maximum: int = 65535) -> bool:
    """Validate priority/weight/port style integers."""
    try:
        value = int(value)
    except (TypeError, ValueError):
        return False
    return 0 <= value <= maximum


def validate_caa_tag(tag: str) -> bool:
    return isinstance(tag, str) and tag.lower() in CAA_TAGS


def sanitize_fqdn(fqdn: str) -> str:
    """
    Sanitize FQDN by removing invalid characters and normalizing.

    Args:
        fqdn: The FQDN to sanitize

    Returns:
        Sanitized FQDN
    """
    if not fqdn:
        return fqdn

    # Remove leading/trailing whitespace and dots
    fqdn = fqdn.strip().strip(".")

    fqdn = fqdn.lower()

    # Keep letters, digits, hyphens, underscores, wildcards and dots
    fqdn = re.sub(r"[^a-z0-9.*_-]", "", fqdn)

    # Remove consecutive dots
    fqdn = re.sub(r"\.+", ".", fqdn)

    fqdn = fqdn.strip(".")

    return fqdn
