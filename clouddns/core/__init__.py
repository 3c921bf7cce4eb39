"""
Core DNS management functionality.

This package contains the record validation and command layer.
"""

from .dns_manager import DNSManager
from .record_manager import RecordManager

__all__ = ["DNSManager", "RecordManager"]
