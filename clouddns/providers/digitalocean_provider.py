"""
DigitalOcean DNS provider implementation.

This module talks to the DigitalOcean v2 REST API with requests.
DigitalOcean has no separate zone IDs: the domain name is the identifier,
and record names are relative with "@" for the apex.
"""

import logging
from typing import Any, Dict, List, Mapping, Optional

from .base_provider import DNSProvider, RecordFormatter, RecordService, ZoneResolver
from .http_client import ApiClient
from ..exceptions import ProviderApiError, ZoneNotFoundError
from ..models import DnsRecord, SetResult, ZoneHandle
from ..utils.formatting import (
    DEFAULT_MX_PRIORITY,
    ensure_trailing_dot,
    split_caa,
    split_mx,
    split_srv,
    strip_trailing_dot,
    unquote_txt,
)
from ..utils.validators import validate_zone_name

logger = logging.getLogger(__name__)

PROVIDER = "DigitalOcean"


class DigitalOceanApiClient(ApiClient):
    """DigitalOcean error bodies look like {"id": "not_found", "message": "..."}."""

    PROVIDER = PROVIDER
    BASE_URL = "https://api.digitalocean.com/v2"

    def paginate(self, path: str, key: str, params: Optional[Dict[str, Any]] = None, per_page: int = 200) -> List[Dict]:
        """Follow links.pages.next until the last page."""
        url = path
        params = dict(params or {}, per_page=per_page)
        items = []
        while url:
            body = self.request("GET", url, params=params)
            items.extend(body.get(key) or [])
            url = ((body.get("links") or {}).get("pages") or {}).get("next")
            # The next link already carries the query string
            params = None
        return items


class DigitalOceanZoneResolver(ZoneResolver):
    """Validates that a domain exists in the account."""

    def __init__(self, api: DigitalOceanApiClient):
        super().__init__()
        self.api = api

    def resolve(self, zone: str) -> ZoneHandle:
        domain = zone.strip().rstrip(".").lower()
        cached = self._cached(domain)
        if cached:
            return cached

        if not validate_zone_name(domain):
            raise ZoneNotFoundError(zone, PROVIDER)

        try:
            body = self.api.request("GET", f"/domains/{domain}")
        except ProviderApiError as e:
            if e.status_code == 404:
                raise ZoneNotFoundError(zone, PROVIDER) from e
            raise

        name = body["domain"]["name"]
        return self._remember(ZoneHandle(id=name, name=name))

    def list_zones(self) -> List[ZoneHandle]:
        zones = [
            self._remember(ZoneHandle(id=domain["name"], name=domain["name"]))
            for domain in self.api.paginate("/domains", "domains")
        ]
        logger.debug(f"Fetched {len(zones)} domains")
        return sorted(zones, key=lambda handle: handle.name)


class DigitalOceanRecordFormatter(RecordFormatter):
    """DigitalOcean keeps priority, port, weight, flags and tag in their own fields."""

    CAPABILITIES = {
        "MX": frozenset({"priority"}),
        "SRV": frozenset({"priority", "weight", "port"}),
        "CAA": frozenset({"flags", "tag"}),
    }

    def encode(self, record_type: str, value: str) -> str:
        record_type = record_type.upper()
        value = value.strip()
        if record_type == "TXT":
            return unquote_txt(value)
        if record_type in ("CNAME", "NS"):
            return _qualify(value)
        if record_type == "MX":
            return _qualify(split_mx(value)[1])
        if record_type == "SRV":
            parts = split_srv(value)
            return _qualify(parts[3] if parts else value)
        if record_type == "CAA":
            return split_caa(value)[2]
        return value

    def decode(self, record_type: str, value: str) -> str:
        record_type = record_type.upper()
        if record_type == "TXT":
            return unquote_txt(value)
        if record_type in ("CNAME", "NS", "MX", "SRV"):
            return strip_trailing_dot(value)
        return value

    def build_payload(
        self,
        record_type: str,
        name: str,
        value: str,
        ttl: int,
        extras: Optional[Mapping[str, Any]] = None,
    ) -> Dict[str, Any]:
        record_type = record_type.upper()
        extras = self.supported_extras(record_type, extras)
        payload: Dict[str, Any] = {
            "type": record_type,
            "name": name,
            "data": self.encode(record_type, value),
            "ttl": ttl,
        }

        if record_type == "MX":
            priority = extras.get("priority", split_mx(value)[0])
            payload["priority"] = int(DEFAULT_MX_PRIORITY if priority is None else priority)
        elif record_type == "SRV":
            parts = split_srv(value)
            defaults = dict(zip(("priority", "weight", "port"), parts[:3])) if parts else {}
            for key in ("priority", "weight", "port"):
                field_value = extras.get(key, defaults.get(key))
                if field_value is not None:
                    payload[key] = int(field_value)
        elif record_type == "CAA":
            flags, tag, _ = split_caa(value)
            payload["flags"] = int(extras.get("flags", flags))
            payload["tag"] = extras.get("tag", tag)

        return payload

    def to_record(self, data: Dict[str, Any]) -> DnsRecord:
        record_type = data.get("type", "")
        record = DnsRecord(
            type=record_type,
            name=data.get("name", ""),
            value=self.decode(record_type, data.get("data") or ""),
            ttl=int(data.get("ttl") or 0),
            id=str(data["id"]) if data.get("id") is not None else None,
            raw=data,
        )
        for key in self.CAPABILITIES.get(record_type, ()):
            if data.get(key) is not None:
                setattr(record, key, data[key])
        return record


def _qualify(host: str) -> str:
    # "@" refers to the domain itself and stays as is
    return host if host == "@" else ensure_trailing_dot(host)


class DigitalOceanRecordService(RecordService):
    """DigitalOcean domain record operations."""

    PROVIDER = PROVIDER
    RECORD_TYPES = ("A", "AAAA", "CNAME", "MX", "TXT", "NS", "SRV", "CAA")
    DEFAULT_TTL = 1800
    MIN_TTL = 30
    MAX_TTL = 86400
    TRANSLATES_APEX = False

    def __init__(self, api: DigitalOceanApiClient):
        self.api = api
        self.formatter = DigitalOceanRecordFormatter()

    def list_records(
        self,
        zone: ZoneHandle,
        record_type: Optional[str] = None,
        name: Optional[str] = None,
    ) -> List[DnsRecord]:
        params = {}
        if record_type:
            params["type"] = record_type.upper()
        if name:
            params["name"] = name

        items = self.api.paginate(f"/domains/{zone.id}/records", "domain_records", params=params)
        records = [
            self.formatter.to_record(data)
            for data in items
            if data.get("type") != "SOA"
            and (not record_type or data.get("type") == record_type.upper())
        ]
        logger.debug(f"Listed {len(records)} records in {zone.name}")
        return records

    def find_record(self, zone: ZoneHandle, record_type: str, name: str) -> Optional[DnsRecord]:
        record_type = record_type.upper()
        fqdn = _fully_qualified(name, zone)
        for record in self.list_records(zone, record_type, fqdn):
            if record.type == record_type and _fully_qualified(record.name, zone) == fqdn:
                return record
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
        name = self.normalize_name(name, zone)
        ttl = self.DEFAULT_TTL if ttl is None else int(ttl)
        payload = self.formatter.build_payload(record_type, name, value, ttl, extras)

        existing = self.find_record(zone, record_type, name)
        if existing is not None:
            self.api.request("PUT", f"/domains/{zone.id}/records/{existing.id}", json=payload)
            logger.info(f"Updated {record_type} record {name} in {zone.name}")
            return SetResult(action="updated", id=existing.id)

        body = self.api.request("POST", f"/domains/{zone.id}/records", json=payload)
        record_id = (body.get("domain_record") or {}).get("id")
        logger.info(f"Created {record_type} record {name} in {zone.name}")
        return SetResult(action="created", id=str(record_id) if record_id is not None else None)

    def _delete(self, zone: ZoneHandle, record: DnsRecord) -> bool:
        try:
            self.api.request("DELETE", f"/domains/{zone.id}/records/{record.id}")
        except ProviderApiError as e:
            if e.status_code == 404:
                logger.info(f"{record.type} record {record.name} was already deleted")
                return False
            raise
        return True


def _fully_qualified(name: str, zone: ZoneHandle) -> str:
    """DigitalOcean's name filter expects a fully-qualified name."""
    name = name.strip().rstrip(".").lower()
    domain = zone.name.lower()
    if name in ("@", domain):
        return domain
    if name.endswith("." + domain):
        return name
    return f"{name}.{domain}"


def create_digitalocean_provider(config: Dict, timeout: int = 30, session=None) -> DNSProvider:
    api = DigitalOceanApiClient(config.get("api_token"), timeout=timeout, session=session)
    return DNSProvider(
        "digitalocean",
        zones=DigitalOceanZoneResolver(api),
        records=DigitalOceanRecordService(api),
    )
