"""
Record Manager - Provider-agnostic DNS record operations

This module validates user input against the active provider's capability
tables, resolves zones and delegates to the provider's record service.
Nothing reaches the network until validation has passed.
"""

import logging
from typing import Any, Dict, List, Optional, Tuple

from ..exceptions import ValidationError
from ..models import DnsRecord, SetResult, ZoneHandle
from ..utils.formatting import fold_extras
from ..utils.validators import (
    validate_caa_tag,
    validate_record_name,
    validate_record_type,
    validate_record_value,
    validate_ttl,
    validate_uint,
)

logger = logging.getLogger(__name__)


class RecordManager:
    """Manages DNS record operations for one provider."""

    def __init__(self, dns_client):
        """Initialize record manager with DNS client."""
        self.dns_client = dns_client

    @property
    def service(self):
        return self.dns_client.provider.records

    @property
    def record_types(self) -> tuple:
        return self.service.RECORD_TYPES

    def resolve_zone(self, zone: str) -> ZoneHandle:
        if not zone or not isinstance(zone, str) or not zone.strip():
            raise ValidationError("Zone cannot be empty")
        return self.dns_client.resolve_zone(zone.strip())

    def list_zones(self) -> List[ZoneHandle]:
        return self.dns_client.list_zones()

    def list_records(self, zone: str, record_type: Optional[str] = None) -> Tuple[ZoneHandle, List[DnsRecord]]:
        """List records in a zone, optionally only one type."""
        if record_type:
            record_type = self.check_record_type(record_type)
        handle = self.resolve_zone(zone)
        records = self.dns_client.list_records(handle, record_type)
        logger.info(f"Found {len(records)} records in {handle.name}")
        return handle, records

    def find_record(self, zone: str, record_type: str, name: str) -> Tuple[ZoneHandle, Optional[DnsRecord]]:
        record_type = self.check_record_type(record_type)
        self.check_record_name(name)
        handle = self.resolve_zone(zone)
        return handle, self.dns_client.find_record(handle, record_type, name.strip())

    def set_record(
        self,
        zone: str,
        record_type: str,
        name: str,
        value: str,
        ttl: Optional[int] = None,
        extras: Optional[Dict[str, Any]] = None,
    ) -> Tuple[ZoneHandle, SetResult]:
        """Validate input, then create or update the record."""
        record_type = self.check_record_type(record_type)
        self.check_record_name(name)
        extras = self.check_extras(extras)
        value = self.check_record_value(record_type, value, extras)
        ttl = self.check_ttl(ttl)

        handle = self.resolve_zone(zone)
        result = self.dns_client.set_record(handle, record_type, name.strip(), value, ttl, extras)
        logger.info(f"Set {record_type} {name} in {handle.name}: {result.action}")
        return handle, result

    def delete_record(
        self,
        zone: str,
        record_type: str,
        name: str,
        record: Optional[DnsRecord] = None,
    ) -> bool:
        """Delete the record; returns False when it did not exist."""
        record_type = self.check_record_type(record_type)
        self.check_record_name(name)
        handle = self.resolve_zone(zone)
        return self.dns_client.delete_record(handle, record_type, name.strip(), record)

    # ----
    # Validation
    # ----

    def check_record_type(self, record_type: str) -> str:
        if not validate_record_type(record_type, self.record_types):
            raise ValidationError(
                f"Invalid record type '{record_type}'. Valid types: {', '.join(self.record_types)}"
            )
        return record_type.strip().upper()

    def check_record_name(self, name: str) -> None:
        if not name or not isinstance(name, str) or not name.strip():
            raise ValidationError("Record name cannot be empty")
        if not validate_record_name(name):
            raise ValidationError(
                f"Invalid record name '{name}'. Use \"@\" for root or a valid hostname"
            )

    def check_record_value(self, record_type: str, value: str, extras: Optional[Dict[str, Any]] = None) -> str:
        """Check the value as the provider will receive it, with any extras folded in."""
        if not value or not isinstance(value, str) or not value.strip():
            raise ValidationError("Record value cannot be empty")
        if not validate_record_value(record_type, fold_extras(record_type, value, extras)):
            raise ValidationError(f"Invalid {record_type} record value '{value}'")
        return value.strip()

    def check_ttl(self, ttl) -> int:
        service = self.service
        if ttl is None or ttl == "":
            return service.DEFAULT_TTL
        if not validate_ttl(ttl, service.MIN_TTL, service.MAX_TTL, service.AUTO_TTL):
            auto = f"{service.AUTO_TTL} (auto) or " if service.AUTO_TTL is not None else ""
            raise ValidationError(
                f"TTL must be {auto}between {service.MIN_TTL} and {service.MAX_TTL} seconds"
            )
        return int(ttl)

    def check_extras(self, extras: Optional[Dict[str, Any]]) -> Dict[str, Any]:
        cleaned = {}
        for key, value in (extras or {}).items():
            if value is None or value == "":
                continue
            if key in ("priority", "weight", "port"):
                if not validate_uint(value):
                    raise ValidationError(f"{key.capitalize()} must be between 0 and 65535")
                cleaned[key] = int(value)
            elif key == "flags":
                if not validate_uint(value, 255):
                    raise ValidationError("Flags must be between 0 and 255")
                cleaned[key] = int(value)
            elif key == "tag":
                if not validate_caa_tag(value):
                    raise ValidationError(
                        f"Invalid CAA tag '{value}'. Valid tags: issue, issuewild, iodef"
                    )
                cleaned[key] = value.lower()
            elif key == "proxied":
                cleaned[key] = bool(value)
            else:
                raise ValidationError(f"Unknown record option '{key}'")
        return cleaned
