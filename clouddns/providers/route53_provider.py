"""
AWS Route53 DNS provider implementation.

This module provides Route53 integration using boto3. Hosted zone IDs are
opaque uppercase strings (optionally prefixed with /hostedzone/); record
values travel in zone-file notation.
"""

import logging
import re
from typing import Any, Dict, List, Mapping, Optional

import boto3
from botocore.config import Config
from botocore.exceptions import BotoCoreError, ClientError

from .base_provider import DNSProvider, RecordFormatter, RecordService, ZoneResolver
from ..exceptions import ProviderApiError, ZoneNotFoundError
from ..models import ALIAS_PREFIX, DnsRecord, SetResult, ZoneHandle
from ..utils.formatting import ensure_trailing_dot, fold_extras, from_zone_file, strip_trailing_dot, to_zone_file

logger = logging.getLogger(__name__)

PROVIDER = "AWS Route53"

_ZONE_ID_RE = re.compile(r"^[A-Z0-9]{14,32}$")
_ZONE_PREFIX_RE = re.compile(r"^/hostedzone/")


def _api_error(action: str, error: Exception) -> ProviderApiError:
    if isinstance(error, ClientError):
        message = error.response.get("Error", {}).get("Message", str(error))
        status = error.response.get("ResponseMetadata", {}).get("HTTPStatusCode")
    else:
        message, status = str(error), None
    return ProviderApiError(PROVIDER, f"Failed to {action}: {message}", status)


def create_route53_client(config: Dict, timeout: int = 30):
    """Create a boto3 Route53 client from provider configuration."""
    session_args = {}
    if config.get("profile"):
        session_args["profile_name"] = config["profile"]
    if config.get("region"):
        session_args["region_name"] = config["region"]
    if config.get("access_key_id") and config.get("secret_access_key"):
        session_args["aws_access_key_id"] = config["access_key_id"]
        session_args["aws_secret_access_key"] = config["secret_access_key"]

    session = boto3.Session(**session_args)
    return session.client(
        "route53",
        config=Config(connect_timeout=timeout, read_timeout=timeout, retries={"max_attempts": 0}),
    )


def clean_zone_id(zone_id: str) -> str:
    return _ZONE_PREFIX_RE.sub("", zone_id.strip())


def looks_like_zone_id(value: str) -> bool:
    return bool(_ZONE_ID_RE.match(clean_zone_id(value)))


class Route53ZoneResolver(ZoneResolver):
    """Hosted zone lookup with an in-process cache."""

    def __init__(self, client):
        super().__init__()
        self.client = client

    def resolve(self, zone: str) -> ZoneHandle:
        cached = self._cached(clean_zone_id(zone))
        if cached:
            return cached

        if looks_like_zone_id(zone):
            return self._get_hosted_zone(clean_zone_id(zone))

        domain = zone.strip().rstrip(".").lower()
        for handle in self.list_zones():
            if handle.name.lower() == domain:
                return handle

        raise ZoneNotFoundError(zone, PROVIDER)

    def list_zones(self) -> List[ZoneHandle]:
        zones = []
        params: Dict[str, Any] = {}
        try:
            while True:
                response = self.client.list_hosted_zones(**params)
                for zone in response.get("HostedZones", []):
                    zones.append(
                        self._remember(
                            ZoneHandle(
                                id=clean_zone_id(zone["Id"]),
                                name=strip_trailing_dot(zone["Name"]),
                            )
                        )
                    )
                if not response.get("IsTruncated"):
                    break
                params["Marker"] = response["NextMarker"]
        except (ClientError, BotoCoreError) as e:
            raise _api_error("fetch hosted zones", e) from e

        logger.debug(f"Fetched {len(zones)} hosted zones")
        return sorted(zones, key=lambda handle: handle.name)

    def _get_hosted_zone(self, zone_id: str) -> ZoneHandle:
        try:
            response = self.client.get_hosted_zone(Id=zone_id)
        except ClientError as e:
            if e.response.get("Error", {}).get("Code") == "NoSuchHostedZone":
                raise ZoneNotFoundError(zone_id, PROVIDER) from e
            raise _api_error(f"fetch hosted zone '{zone_id}'", e) from e
        except BotoCoreError as e:
            raise _api_error(f"fetch hosted zone '{zone_id}'", e) from e

        hosted_zone = response["HostedZone"]
        return self._remember(ZoneHandle(id=zone_id, name=strip_trailing_dot(hosted_zone["Name"])))


class Route53RecordFormatter(RecordFormatter):
    """Route53 takes zone-file values; extras are folded into the value itself."""

    CAPABILITIES = {
        "MX": frozenset({"priority"}),
        "SRV": frozenset({"priority", "weight", "port"}),
        "CAA": frozenset({"flags", "tag"}),
    }

    def encode(self, record_type: str, value: str) -> str:
        return to_zone_file(record_type, value)

    def decode(self, record_type: str, value: str) -> str:
        return from_zone_file(record_type, value)

    def encode_with_extras(self, record_type: str, value: str, extras: Optional[Mapping[str, Any]]) -> str:
        """Fold priority/weight/port/flags/tag options into the zone-file value."""
        extras = self.supported_extras(record_type, extras)
        return self.encode(record_type, fold_extras(record_type, value, extras))

    def to_record(self, record_set: Dict[str, Any], value: Optional[str] = None) -> DnsRecord:
        record_type = record_set.get("Type", "")
        name = strip_trailing_dot(record_set.get("Name", ""))
        if "AliasTarget" in record_set:
            return DnsRecord(
                type=record_type,
                name=name,
                value=ALIAS_PREFIX + record_set["AliasTarget"].get("DNSName", ""),
                ttl=0,
                raw=record_set,
            )
        return DnsRecord(
            type=record_type,
            name=name,
            value=self.decode(record_type, value or ""),
            ttl=int(record_set.get("TTL", 300)),
            raw=record_set,
        )


class Route53RecordService(RecordService):
    """Route53 record operations over resource record sets."""

    PROVIDER = PROVIDER
    RECORD_TYPES = ("A", "AAAA", "CNAME", "MX", "TXT", "NS", "SRV", "CAA", "PTR")
    DEFAULT_TTL = 300
    MIN_TTL = 1
    MAX_TTL = 2147483647

    def __init__(self, client):
        self.client = client
        self.formatter = Route53RecordFormatter()

    def list_records(self, zone: ZoneHandle, record_type: Optional[str] = None) -> List[DnsRecord]:
        params: Dict[str, Any] = {"HostedZoneId": zone.id}
        records = []

        try:
            while True:
                response = self.client.list_resource_record_sets(**params)
                for record_set in response.get("ResourceRecordSets", []):
                    if record_set.get("Type") == "SOA":
                        continue
                    if record_type and record_set.get("Type") != record_type.upper():
                        continue
                    records.extend(self._expand(record_set))

                if not response.get("IsTruncated"):
                    break
                params["StartRecordName"] = response["NextRecordName"]
                params["StartRecordType"] = response["NextRecordType"]
                if response.get("NextRecordIdentifier"):
                    params["StartRecordIdentifier"] = response["NextRecordIdentifier"]
                else:
                    params.pop("StartRecordIdentifier", None)
        except (ClientError, BotoCoreError) as e:
            raise _api_error("list DNS records", e) from e

        logger.debug(f"Listed {len(records)} records in {zone.name}")
        return records

    def find_record(self, zone: ZoneHandle, record_type: str, name: str) -> Optional[DnsRecord]:
        record_type = record_type.upper()
        fqdn = ensure_trailing_dot(self.normalize_name(name, zone)).lower()

        try:
            response = self.client.list_resource_record_sets(
                HostedZoneId=zone.id,
                StartRecordName=fqdn,
                StartRecordType=record_type,
                MaxItems="1",
            )
        except (ClientError, BotoCoreError) as e:
            raise _api_error("find DNS record", e) from e

        for record_set in response.get("ResourceRecordSets", []):
            if record_set.get("Type") != record_type:
                continue
            if _decode_name(record_set.get("Name", "")).lower() != fqdn:
                continue
            records = self._expand(record_set)
            if records:
                return records[0]
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
        existing = self.find_record(zone, record_type, fqdn)

        record_set = {
            "Name": ensure_trailing_dot(fqdn),
            "Type": record_type,
            "TTL": ttl,
            "ResourceRecords": [
                {"Value": self.formatter.encode_with_extras(record_type, value, extras)}
            ],
        }
        change_id = self._change(zone, "UPSERT", record_set, "set DNS record")

        action = "updated" if existing else "created"
        logger.info(f"{action.capitalize()} {record_type} record {fqdn} in {zone.name}")
        return SetResult(action=action, id=change_id)

    def _delete(self, zone: ZoneHandle, record: DnsRecord) -> bool:
        record_set = dict(record.raw) if record.raw else {
            "Name": ensure_trailing_dot(record.name),
            "Type": record.type,
            "TTL": record.ttl,
            "ResourceRecords": [{"Value": self.formatter.encode(record.type, record.value)}],
        }
        try:
            self._change(zone, "DELETE", record_set, "delete DNS record")
        except ProviderApiError as e:
            if "not found" in e.message.lower():
                logger.info(f"{record.type} record {record.name} was already deleted")
                return False
            raise
        return True

    def _change(self, zone: ZoneHandle, action: str, record_set: Dict[str, Any], description: str) -> str:
        try:
            response = self.client.change_resource_record_sets(
                HostedZoneId=zone.id,
                ChangeBatch={"Changes": [{"Action": action, "ResourceRecordSet": record_set}]},
            )
        except (ClientError, BotoCoreError) as e:
            raise _api_error(description, e) from e
        return response.get("ChangeInfo", {}).get("Id", "").replace("/change/", "")

    def _expand(self, record_set: Dict[str, Any]) -> List[DnsRecord]:
        """One DnsRecord per value; alias sets become a single TTL-0 record."""
        record_set = dict(record_set, Name=_decode_name(record_set.get("Name", "")))
        if "AliasTarget" in record_set:
            return [self.formatter.to_record(record_set)]
        return [
            self.formatter.to_record(record_set, resource.get("Value", ""))
            for resource in record_set.get("ResourceRecords", [])
        ]


def _decode_name(name: str) -> str:
    # Route53 returns "*" as the octal escape \052
    return name.replace("\\052", "*")


def create_route53_provider(config: Dict, timeout: int = 30, client=None) -> DNSProvider:
    client = client or create_route53_client(config, timeout)
    return DNSProvider(
        "aws",
        zones=Route53ZoneResolver(client),
        records=Route53RecordService(client),
    )
