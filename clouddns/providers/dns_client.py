"""
DNS Client - Unified interface for DNS provider APIs

This module builds the configured provider (AWS Route53, Cloudflare,
DigitalOcean or the in-memory mock) and exposes its zone resolver and
record service behind one object.
"""

import logging
import os
from typing import Dict, List, Optional

from .base_provider import DNSProvider
from .cloudflare_provider import create_cloudflare_provider
from .digitalocean_provider import create_digitalocean_provider
from .mock_provider import create_mock_provider
from .route53_provider import create_route53_provider
from ..exceptions import ProviderConfigError
from ..models import DnsRecord, SetResult, ZoneHandle

logger = logging.getLogger(__name__)

PROVIDER_ALIASES = {
    "aws": "aws",
    "route53": "aws",
    "cloudflare": "cloudflare",
    "cf": "cloudflare",
    "digitalocean": "digitalocean",
    "do": "digitalocean",
    "mock": "mock",
}

# Environment variables checked when a token is missing from the config file.
TOKEN_ENV_VARS = {
    "cloudflare": ("CLOUDFLARE_API_TOKEN", "CF_API_TOKEN"),
    "digitalocean": ("DIGITALOCEAN_API_TOKEN", "DO_API_TOKEN"),
}


def canonical_provider_name(name: str) -> str:
    try:
        return PROVIDER_ALIASES[name.strip().lower()]
    except KeyError:
        raise ProviderConfigError(
            f"Unknown provider '{name}'. Valid providers: {', '.join(sorted(set(PROVIDER_ALIASES.values())))}"
        )


class DNSClient:
    """Unified DNS client that supports multiple providers."""

    def __init__(self, config: Dict, provider_name: Optional[str] = None):
        """Initialize DNS client with configuration."""
        self.config = config
        self.provider_name = canonical_provider_name(
            provider_name or self.config.get("default_provider", "mock")
        )
        self.provider = self._get_provider()

    def _get_provider(self) -> DNSProvider:
        """Get DNS provider based on configuration."""
        provider_config = dict(self.config.get("dns_providers", {}).get(self.provider_name) or {})
        timeout = int(self.config.get("timeout", 30))

        if self.provider_name == "aws":
            provider_config.setdefault("profile", os.environ.get("AWS_PROFILE"))
            provider_config.setdefault("region", os.environ.get("AWS_REGION"))
            return create_route53_provider(provider_config, timeout)
        if self.provider_name == "cloudflare":
            provider_config["api_token"] = self._api_token(provider_config)
            return create_cloudflare_provider(provider_config, timeout)
        if self.provider_name == "digitalocean":
            provider_config["api_token"] = self._api_token(provider_config)
            return create_digitalocean_provider(provider_config, timeout)
        return create_mock_provider(provider_config)

    def _api_token(self, provider_config: Dict) -> str:
        token = provider_config.get("api_token")
        if token:
            return token

        env_vars = TOKEN_ENV_VARS[self.provider_name]
        for env_var in env_vars:
            if os.environ.get(env_var):
                logger.debug(f"Using API token from {env_var}")
                return os.environ[env_var]

        raise ProviderConfigError(
            f"{self.provider_name} API token not found. Set {' or '.join(env_vars)} "
            f"or dns_providers.{self.provider_name}.api_token in the config file"
        )

    @property
    def record_types(self) -> tuple:
        return self.provider.record_types

    def resolve_zone(self, zone: str) -> ZoneHandle:
        return self.provider.zones.resolve(zone)

    def list_zones(self) -> List[ZoneHandle]:
        return self.provider.zones.list_zones()

    def list_records(self, zone: ZoneHandle, record_type: Optional[str] = None) -> List[DnsRecord]:
        """Get all DNS records for a zone."""
        return self.provider.records.list_records(zone, record_type)

    def find_record(self, zone: ZoneHandle, record_type: str, name: str) -> Optional[DnsRecord]:
        return self.provider.records.find_record(zone, record_type, name)

    def set_record(self, zone: ZoneHandle, record_type: str, name: str, value: str,
                   ttl: Optional[int] = None, extras: Optional[Dict] = None) -> SetResult:
        """Create or update a DNS record."""
        return self.provider.records.set_record(zone, record_type, name, value, ttl, extras)

    def delete_record(self, zone: ZoneHandle, record_type: str, name: str,
                      record: Optional[DnsRecord] = None) -> bool:
        """Delete a DNS record."""
        return self.provider.records.delete_record(zone, record_type, name, record)
