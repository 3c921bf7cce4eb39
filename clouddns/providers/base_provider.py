"""
Base DNS provider interface.

This module defines the abstract base classes every provider implements:
a zone resolver, a record formatter and a record service, bundled together
by DNSProvider.
"""

import logging
from abc import ABC, abstractmethod
from typing import Any, Dict, FrozenSet, List, Mapping, Optional

from ..exceptions import RecordNotFoundError
from ..models import DnsRecord, SetResult, ZoneHandle

logger = logging.getLogger(__name__)


class ZoneResolver(ABC):
    """Maps user zone input (ID or domain) to a ZoneHandle."""

    def __init__(self):
        self._cache: Dict[str, ZoneHandle] = {}

    @abstractmethod
    def resolve(self, zone: str) -> ZoneHandle:
        """Resolve a zone ID or domain name, raising ZoneNotFoundError."""
        pass

    @abstractmethod
    def list_zones(self) -> List[ZoneHandle]:
        """List every zone in the account."""
        pass

    def get_zone_name(self, zone_id: str) -> str:
        """Return the apex domain of a zone ID."""
        return self.resolve(zone_id).name

    def clear_cache(self) -> None:
        self._cache = {}

    def _cached(self, key: str) -> Optional[ZoneHandle]:
        return self._cache.get(key) or self._cache.get(key.lower().rstrip("."))

    def _remember(self, handle: ZoneHandle) -> ZoneHandle:
        self._cache[handle.id] = handle
        self._cache[handle.name.lower()] = handle
        return handle


class RecordFormatter(ABC):
    """
    Converts between user values and a provider's wire values.

    CAPABILITIES maps each supported record type to the optional fields the
    provider accepts for it; anything else is left out of the payload.
    """

    CAPABILITIES: Mapping[str, FrozenSet[str]] = {}

    @abstractmethod
    def encode(self, record_type: str, value: str) -> str:
        """Encode a user value for the wire."""
        pass

    @abstractmethod
    def decode(self, record_type: str, value: str) -> str:
        """Normalize a wire value for display."""
        pass

    def supported_extras(self, record_type: str, extras: Optional[Mapping[str, Any]]) -> Dict[str, Any]:
        """Drop extras the provider does not accept for this record type."""
        allowed = self.CAPABILITIES.get(record_type.upper(), frozenset())
        kept = {}
        for key, value in (extras or {}).items():
            if value is None:
                continue
            if key in allowed:
                kept[key] = value
            else:
                logger.debug(f"Ignoring '{key}' for {record_type} records")
        return kept


class RecordService(ABC):
    """List/find/upsert/delete operations against one provider."""

    PROVIDER = ""
    RECORD_TYPES: tuple = ()
    DEFAULT_TTL = 300
    MIN_TTL = 1
    MAX_TTL = 86400
    AUTO_TTL: Optional[int] = None
    TRANSLATES_APEX = True

    formatter: RecordFormatter

    def normalize_name(self, name: str, zone: ZoneHandle) -> str:
        """
        Resolve "@" to the zone apex and qualify relative names.

        Idempotent: normalizing an already normalized name returns it unchanged.
        """
        if not self.TRANSLATES_APEX:
            return name

        name = name.strip().rstrip(".")
        zone_name = zone.name.rstrip(".")

        if name == "@":
            return zone_name
        if name.lower() == zone_name.lower() or name.lower().endswith("." + zone_name.lower()):
            return name
        return f"{name}.{zone_name}"

    @abstractmethod
    def list_records(self, zone: ZoneHandle, record_type: Optional[str] = None) -> List[DnsRecord]:
        """Fetch all user-manageable records, optionally filtered by type."""
        pass

    @abstractmethod
    def find_record(self, zone: ZoneHandle, record_type: str, name: str) -> Optional[DnsRecord]:
        """Find the record matching (type, name), or None."""
        pass

    @abstractmethod
    def set_record(
        self,
        zone: ZoneHandle,
        record_type: str,
        name: str,
        value: str,
        ttl: Optional[int] = None,
        extras: Optional[Mapping[str, Any]] = None,
    ) -> SetResult:
        """Create the record, or update it in place when it already exists."""
        pass

    @abstractmethod
    def _delete(self, zone: ZoneHandle, record: DnsRecord) -> bool:
        """Delete a record fetched from the provider; False if it was already gone."""
        pass

    def delete_record(
        self,
        zone: ZoneHandle,
        record_type: str,
        name: str,
        record: Optional[DnsRecord] = None,
    ) -> bool:
        """
        Delete the record matching (type, name).

        Pass the record returned by find_record to skip the lookup. Returns
        True when a record was removed and False when there was nothing to
        delete; a missing record is not an error.
        """
        try:
            if record is None:
                record = self._require_record(zone, record_type, name)
            deleted = self._delete(zone, record)
        except RecordNotFoundError as e:
            logger.info(f"{e}, nothing to delete")
            return False

        if deleted:
            logger.info(f"Deleted {record_type} record {record.name} in {zone.name}")
        return deleted

    def _require_record(self, zone: ZoneHandle, record_type: str, name: str) -> DnsRecord:
        record = self.find_record(zone, record_type, name)
        if record is None:
            raise RecordNotFoundError(record_type, name, zone.name)
        return record


class DNSProvider:
    """A provider's zone resolver and record service."""

    def __init__(self, name: str, zones: ZoneResolver, records: RecordService):
        self.name = name
        self.zones = zones
        self.records = records

    @property
    def record_types(self) -> tuple:
        return self.records.RECORD_TYPES

    def __repr__(self) -> str:
        return f"DNSProvider({self.name!r})"
