"""
Provider-agnostic record and zone types.

Providers convert their API responses into these structs right after each
call, so nothing above the provider modules sees a provider's wire shape.
"""

from dataclasses import asdict, dataclass, field
from typing import Any, Dict, Optional

ALIAS_PREFIX = "ALIAS: "

# Keys of the optional, provider-specific record fields.
EXTRA_FIELDS = ("proxied", "priority", "weight", "port", "flags", "tag")


@dataclass(frozen=True)
class ZoneHandle:
    """A resolved zone: provider identifier plus apex domain (no trailing dot)."""

    id: str
    name: str


@dataclass
class DnsRecord:
    """A single DNS record as shown to the user."""

    type: str
    name: str
    value: str
    ttl: int
    id: Optional[str] = None
    proxied: Optional[bool] = None
    priority: Optional[int] = None
    weight: Optional[int] = None
    port: Optional[int] = None
    flags: Optional[int] = None
    tag: Optional[str] = None
    raw: Dict[str, Any] = field(default_factory=dict, repr=False, compare=False)

    @property
    def is_alias(self) -> bool:
        return self.value.startswith(ALIAS_PREFIX)

    def extras(self) -> Dict[str, Any]:
        """Return the optional fields that are set on this record."""
        return {key: getattr(self, key) for key in EXTRA_FIELDS if getattr(self, key) is not None}

    def to_dict(self) -> Dict[str, Any]:
        data = asdict(self)
        data.pop("raw")
        return {key: value for key, value in data.items() if value is not None}


@dataclass
class SetResult:
    """Outcome of an upsert."""

    action: str
    id: Optional[str] = None

    @property
    def created(self) -> bool:
        return self.action == "created"
