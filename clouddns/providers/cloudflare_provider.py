"""
Cloudflare DNS provider implementation.

This module talks to the Cloudflare v4 REST API with requests. Zone IDs are
32-character hex strings; record names are fully qualified.
"""

import logging
import re
from typing import Any, Dict, List, Mapping, Optional

from .base_provider import DNSProvider, RecordFormatter, RecordService, ZoneResolver
from .http_client import ApiClient
from ..exceptions import ProviderApiError, ZoneNotFoundError
from ..models import DnsRecord, SetResult, ZoneHandle
from ..utils.formatting import (
    DEFAULT_MX_PRIORITY,
    quote_txt,
    split_caa,
    split_mx,
    strip_trailing_dot,
    unquote_txt,
)

logger = logging.getLogger(__name__)

PROVIDER = "Cloudflare"

_ZONE_ID_RE = re.compile(r"^[a-f0-9]{32}$", re.IGNORECASE)

# Cloudflare error codes meaning the zone or record does not exist.
_ZONE_MISSING_CODES = {1001, 7003}
_RECORD_MISSING_CODES = {81044}


class CloudflareApiClient(ApiClient):
    """Cloudflare wraps every response in {success, errors, result}."""

    PROVIDER = PROVIDER
    BASE_URL = "https://api.cloudflare.com/client/v4"

    def check_response(self, response, body: Dict[str, Any]) -> None:
        if body.get("success", response.status_code < 400):
            return
        errors = body.get("errors") or [{"message": "Unknown error"}]
        message = ", ".join(error.get("message", "Unknown") for error in errors)
        codes = [error.get("code") for error in errors if error.get("code") is not None]
        raise ProviderApiError(PROVIDER, message, response.status_code, codes)

    def paginate(self, path: str, params: Optional[Dict[str, Any]] = None, per_page: int = 100) -> List[Dict]:
        """Fetch every page of a list endpoint."""
        params = dict(params or {}, per_page=per_page, page=1)
        results = []
        while True:
            body = self.request("GET", path, params=dict(params))
            results.extend(body.get("result") or [])
            total_pages = (body.get("result_info") or {}).get("total_pages") or 1
            if params["page"] >= total_pages:
                break
            params["page"] += 1
        return results


def looks_like_zone_id(value: str) -> bool:
    return bool(_ZONE_ID_RE.match(value.strip()))


class CloudflareZoneResolver(ZoneResolver):
    """Zone lookup by ID or name with an in-process cache."""

    def __init__(self, api: CloudflareApiClient):
        super().__init__()
        self.api = api

    def resolve(self, zone: str) -> ZoneHandle:
        zone = zone.strip()
        cached = self._cached(zone)
        if cached:
            return cached

        if looks_like_zone_id(zone):
            try:
                body = self.api.request("GET", f"/zones/{zone.lower()}")
            except ProviderApiError as e:
                if e.status_code == 404 or _ZONE_MISSING_CODES.intersection(e.codes):
                    raise ZoneNotFoundError(zone, PROVIDER) from e
                raise
            return self._remember(self._to_handle(body["result"]))

        domain = zone.rstrip(".").lower()
        body = self.api.request("GET", "/zones", params={"name": domain})
        zones = body.get("result") or []
        if not zones:
            raise ZoneNotFoundError(zone, PROVIDER)
        return self._remember(self._to_handle(zones[0]))

    def list_zones(self) -> List[ZoneHandle]:
        zones = [self._remember(self._to_handle(zone)) for zone in self.api.paginate("/zones", per_page=50)]
        logger.debug(f"Fetched {len(zones)} zones")
        return sorted(zones, key=lambda handle: handle.name)

    @staticmethod
    def _to_handle(zone: Dict[str, Any]) -> ZoneHandle:
        return ZoneHandle(id=zone["id"], name=strip_trailing_dot(zone["name"]))


class CloudflareRecordFormatter(RecordFormatter):
    """Cloudflare content values, with proxied/priority/CAA data as separate fields."""

    PROXIABLE_TYPES = ("A", "AAAA", "CNAME")

    CAPABILITIES = {
        "A": frozenset({"proxied"}),
        "AAAA": frozenset({"proxied"}),
        "CNAME": frozenset({"proxied"}),
        "MX": frozenset({"priority"}),
        "CAA": frozenset({"flags", "tag"}),
    }

    def encode(self, record_type: str, value: str) -> str:
        record_type = record_type.upper()
        value = value.strip()
        if record_type == "TXT":
            return quote_txt(value)
        if record_type in ("CNAME", "NS"):
            return strip_trailing_dot(value)
        if record_type == "MX":
            return strip_trailing_dot(split_mx(value)[1])
        return value

    def decode(self, record_type: str, value: str) -> str:
        record_type = record_type.upper()
        if record_type == "TXT":
            return unquote_txt(value)
        if record_type in ("CNAME", "NS", "MX"):
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
        payload: Dict[str, Any] = {"type": record_type, "name": name, "ttl": ttl}

        if record_type == "CAA":
            flags, tag, caa_value = split_caa(value)
            payload["data"] = {
                "flags": int(extras.get("flags", flags)),
                "tag": extras.get("tag", tag),
                "value": caa_value,
            }
        else:
            payload["content"] = self.encode(record_type, value)

        # The API rejects proxied on types that cannot be proxied (error 9004)
        if record_type in self.PROXIABLE_TYPES:
            payload["proxied"] = bool(extras.get("proxied", False))

        if record_type == "MX":
            parsed_priority = split_mx(value)[0]
            priority = extras.get("priority", parsed_priority)
            payload["priority"] = int(DEFAULT_MX_PRIORITY if priority is None else priority)

        return payload

    def to_record(self, data: Dict[str, Any]) -> DnsRecord:
        record_type = data.get("type", "")
        record = DnsRecord(
            type=record_type,
            name=data.get("name", ""),
            value=self.decode(record_type, data.get("content", "")),
            ttl=int(data.get("ttl", 1)),
            id=data.get("id"),
            raw=data,
        )
        if record_type in self.PROXIABLE_TYPES:
            record.proxied = bool(data.get("proxied", False))
        if data.get("priority") is not None:
            record.priority = int(data["priority"])
        if record_type == "CAA" and isinstance(data.get("data"), dict):
            record.flags = data["data"].get("flags")
            record.tag = data["data"].get("tag")
        return record


class CloudflareRecordService(RecordService):
    """Cloudflare record operations."""

    PROVIDER = PROVIDER
    RECORD_TYPES = ("A", "AAAA", "CNAME", "MX", "TXT", "NS", "CAA")
    DEFAULT_TTL = 1
    MIN_TTL = 60
    MAX_TTL = 86400
    AUTO_TTL = 1

    def __init__(self, api: CloudflareApiClient):
        self.api = api
        self.formatter = CloudflareRecordFormatter()

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

        results = self.api.paginate(f"/zones/{zone.id}/dns_records", params=params)
        records = [
            self.formatter.to_record(data)
            for data in results
            if data.get("type") != "SOA"
        ]
        logger.debug(f"Listed {len(records)} records in {zone.name}")
        return records

    def find_record(self, zone: ZoneHandle, record_type: str, name: str) -> Optional[DnsRecord]:
        record_type = record_type.upper()
        fqdn = self.normalize_name(name, zone)
        for record in self.list_records(zone, record_type, fqdn):
            if record.type == record_type and record.name.lower() == fqdn.lower():
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
        fqdn = self.normalize_name(name, zone)
        ttl = self.DEFAULT_TTL if ttl is None else int(ttl)
        extras = dict(extras or {})

        existing = self.find_record(zone, record_type, fqdn)
        if existing is not None and extras.get("proxied") is None and existing.proxied is not None:
            extras["proxied"] = existing.proxied

        payload = self.formatter.build_payload(record_type, fqdn, value, ttl, extras)

        if existing is not None:
            self.api.request("PUT", f"/zones/{zone.id}/dns_records/{existing.id}", json=payload)
            logger.info(f"Updated {record_type} record {fqdn} in {zone.name}")
            return SetResult(action="updated", id=existing.id)

        body = self.api.request("POST", f"/zones/{zone.id}/dns_records", json=payload)
        record_id = (body.get("result") or {}).get("id")
        logger.info(f"Created {record_type} record {fqdn} in {zone.name}")
        return SetResult(action="created", id=record_id)

    def _delete(self, zone: ZoneHandle, record: DnsRecord) -> bool:
        try:
            self.api.request("DELETE", f"/zones/{zone.id}/dns_records/{record.id}")
        except ProviderApiError as e:
            if e.status_code == 404 or _RECORD_MISSING_CODES.intersection(e.codes):
                logger.info(f"{record.type} record {record.name} was already deleted")
                return False
            raise
        return True


def create_cloudflare_provider(config: Dict, timeout: int = 30, session=None) -> DNSProvider:
    api = CloudflareApiClient(config.get("api_token"), timeout=timeout, session=session)
    return DNSProvider(
        "cloudflare",
        zones=CloudflareZoneResolver(api),
        records=CloudflareRecordService(api),
    )
