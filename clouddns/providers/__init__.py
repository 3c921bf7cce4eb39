"""
DNS provider implementations.

This package contains implementations for AWS Route53, Cloudflare,
DigitalOcean and an in-memory mock provider.
"""

from .base_provider import DNSProvider, RecordFormatter, RecordService, ZoneResolver
from .cloudflare_provider import CloudflareRecordService, CloudflareZoneResolver
from .digitalocean_provider import DigitalOceanRecordService, DigitalOceanZoneResolver
from .dns_client import DNSClient
from .mock_provider import MockRecordService, MockZoneResolver
from .route53_provider import Route53RecordService, Route53ZoneResolver

__all__ = [
    "DNSClient",
    "DNSProvider",
    "RecordFormatter",
    "RecordService",
    "ZoneResolver",
    "Route53ZoneResolver",
    "Route53RecordService",
    "CloudflareZoneResolver",
    "CloudflareRecordService",
    "DigitalOceanZoneResolver",
    "DigitalOceanRecordService",
    "MockZoneResolver",
    "MockRecordService",
]
