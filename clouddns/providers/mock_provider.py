"""
Mock DNS provider for testing and demonstration.

This module provides a mock DNS provider that stores zones and records in
memory for safe testing and demonstration purposes. Names behave like
Cloudflare: "@" is translated to the zone apex.
"""

import itertools
import logging
from typing import Any, Dict, List, Mapping, Optional

from .base_provider import DNSProvider, RecordFormatter, RecordService, ZoneResolver
from ..exceptions import ZoneNotFoundError
from ..models import DnsRecord, SetResult, ZoneHandle
from ..utils.formatting import fold_extras, from_zone_file, to_zone_file
from ..utils.validators import sanitize_fqdn, validate_zone_name

logger = logging.getLogger(__name__)

PROVIDER = "Mock"


class MockZoneResolver(ZoneResolver):
    """Resolves zones registered in memory; IDs look like 'zone-1'."""

    def __init__(self, zones: Optional[List[str]] = None):
        super().__init__()
        self.zones: Dict[str, ZoneHandle] = {}
        self.lookups = 0
        for zone in zones or []:
            self.add_zone(zone)

    def add_zone(self, name: str) -> ZoneHandle:
        name = sanitize_fqdn(name)
        if not validate_zone_name(name):
            raise ValueError(f"Invalid zone name: {name}")
        handle = ZoneHandle(id=f"zone-{len(self.zones) + 1}", name=name)
        self.zones[handle.id] = handle
        logger.info(f"Mock: Added zone {name}")
        return handle

    def resolve(self, zone: str) -> ZoneHandle:
        cached = self._cached(zone.strip())
        if cached:
            return cached

        if zone in self.zones:
            return self._remember(self.zones[zone])

        self.lookups += 1
        domain = sanitize_fqdn(zone)
        for handle in self.zones.values():
            if handle.name == domain:
                return self._remember(handle)

        raise ZoneNotFoundError(zone, PROVIDER)

    def list_zones(self) -> List[ZoneHandle]:
        self.lookups += 1
        return sorted(self.zones.values(), key=lambda handle: handle.name)


class MockRecordFormatter(RecordFormatter):
    """Stores values in zone-file notation."""

    CAPABILITIES = {
        "A": frozenset({"proxied"}),
        "AAAA": frozenset({"proxied"}),
        "CNAME": frozenset({"proxied"}),
        "MX": frozenset({"priority"}),
        "SRV": frozenset({"priority", "weight", "port"}),
        "CAA": frozenset({"flags", "tag"}),
    }

    def encode(self, record_type: str, value: str) -> str:
        return to_zone_file(record_type, value)

    def decode(self, record_type: str, value: str) -> str:
        return from_zone_file(record_type, value)


class MockRecordService(RecordService):
    """In-memory record storage keyed by zone ID."""

    PROVIDER = PROVIDER
    RECORD_TYPES = ("A", "AAAA", "CNAME", "MX", "TXT", "NS", "SRV", "CAA", "PTR")
    DEFAULT_TTL = 300
    MIN_TTL = 1
    MAX_TTL = 86400

    def __init__(self):
        self.records: Dict[str, List[Dict[str, Any]]] = {}
        self.formatter = MockRecordFormatter()
        self._ids = itertools.count(1)

    def list_records(self, zone: ZoneHandle, record_type: Optional[str] = None) -> List[DnsRecord]:
        stored = self.records.get(zone.id, [])
        records = [
            self._to_record(data)
            for data in stored
            if not record_type or data["type"] == record_type.upper()
        ]
        logger.info(f"Mock: Retrieved {len(records)} records")
        return records

    def find_record(self, zone: ZoneHandle, record_type: str, name: str) -> Optional[DnsRecord]:
        fqdn = sanitize_fqdn(self.normalize_name(name, zone))
        for data in self.records.get(zone.id, []):
            if data["type"] == record_type.upper() and data["name"] == fqdn:
                return self._to_record(data)
        return None

    def set_record(
        self,
        zone: ZoneHandle,
        record_type: str,
        name: str,
        value: str,
        ttl: Optional[int] = None,
        extras: Optional[Mapping[str, Any]] = None,
    ) -> SetResult:
        record_type = record_type.upper()
        fqdn = sanitize_fqdn(self.normalize_name(name, zone))
        extras = self.formatter.supported_extras(record_type, extras)
        data = {
            "type": record_type,
            "name": fqdn,
            "value": self.formatter.encode(record_type, fold_extras(record_type, value, extras)),
            "ttl": self.DEFAULT_TTL if ttl is None else int(ttl),
            "proxied": extras.get("proxied"),
        }

        existing = self.find_record(zone, record_type, fqdn)
        zone_records = self.records.setdefault(zone.id, [])
        if existing is not None:
            for index, stored in enumerate(zone_records):
                if stored["id"] == existing.id:
                    zone_records[index] = dict(data, id=existing.id)
            logger.info(f"Mock: Updated record {fqdn} -> {value}")
            return SetResult(action="updated", id=existing.id)

        data["id"] = f"rec-{next(self._ids)}"
        zone_records.append(data)
        logger.info(f"Mock: Created record {fqdn} -> {value}")
        return SetResult(action="created", id=data["id"])

    def _delete(self, zone: ZoneHandle, record: DnsRecord) -> bool:
        zone_records = self.records.get(zone.id, [])
        for index, stored in enumerate(zone_records):
            if stored["id"] == record.id:
                del zone_records[index]
                logger.info(f"Mock: Deleted record {record.name}")
                return True
        return False

    def _to_record(self, data: Dict[str, Any]) -> DnsRecord:
        return DnsRecord(
            type=data["type"],
            name=data["name"],
            value=self.formatter.decode(data["type"], data["value"]),
            ttl=data["ttl"],
            id=data["id"],
            proxied=data.get("proxied"),
            raw=dict(data),
        )


def create_mock_provider(config: Optional[Dict] = None) -> DNSProvider:
    config = config or {}
    return DNSProvider(
        "mock",
        zones=MockZoneResolver(config.get("zones", ["example.com"])),
        records=MockRecordService(),
    )
