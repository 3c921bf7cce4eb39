"""
Cloud DNS Manager - DNS record management for hosted DNS providers

One command-line tool and library for listing, creating, updating and
deleting records on AWS Route53, Cloudflare and DigitalOcean.
"""

__version__ = "1.0.0"
__author__ = "Cloud DNS Manager Team"
__description__ = "DNS record management across AWS Route53, Cloudflare and DigitalOcean"

from .core.dns_manager import DNSManager
from .core.record_manager import RecordManager
from .models import DnsRecord, SetResult, ZoneHandle
from .providers.dns_client import DNSClient

__all__ = [
    "DNSManager",
    "RecordManager",
    "DNSClient",
    "DnsRecord",
    "SetResult",
    "ZoneHandle",
]
