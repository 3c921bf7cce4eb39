"""
Exceptions raised by the DNS record layer.

Every failure the providers can produce maps onto one of these types so the
command layer only has to catch DNSError.
"""


class DNSError(Exception):
    """Base class for all clouddns errors."""


class ValidationError(DNSError):
    """Malformed input, rejected before any network call."""


class ProviderConfigError(DNSError):
    """Provider is unknown or missing credentials."""


class ZoneNotFoundError(DNSError):
    """No zone matched the given ID or domain name."""

    def __init__(self, zone: str, provider: str = ""):
        self.zone = zone
        self.provider = provider
        where = f" in your {provider} account" if provider else ""
        super().__init__(f"Zone '{zone}' not found{where}")


class RecordNotFoundError(DNSError):
    """The record to operate on does not exist."""

    def __init__(self, record_type: str, name: str, zone: str = ""):
        self.record_type = record_type
        self.name = name
        self.zone = zone
        where = f" in zone '{zone}'" if zone else ""
        super().__init__(f"No {record_type} record found for '{name}'{where}")


class ProviderApiError(DNSError):
    """Transport, HTTP or SDK level failure reported by a provider."""

    def __init__(self, provider: str, message: str, status_code: int = None, codes=()):
        self.provider = provider
        self.message = message
        self.status_code = status_code
        self.codes = tuple(codes)
        super().__init__(f"{provider} API error: {message}")
