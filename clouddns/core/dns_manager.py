"""
DNS Manager - Command layer for DNS record management

Renders zones and records with rich, confirms destructive operations and
turns every DNS error into a printed message and a False return value.
"""

import logging
from typing import Dict, List, Optional, Union

from rich.console import Console
from rich.markup import escape
from rich.prompt import Confirm, Prompt
from rich.table import Table

from ..exceptions import DNSError
from ..models import DnsRecord, ZoneHandle
from ..providers.dns_client import DNSClient
from ..utils.config import DEFAULT_CONFIG_PATH, load_config
from ..utils.formatting import truncate_value
from .record_manager import RecordManager

console = Console()
logger = logging.getLogger(__name__)


class DNSManager:
    """Main DNS management class that orchestrates the provider calls."""

    def __init__(
        self,
        config: Union[str, Dict] = DEFAULT_CONFIG_PATH,
        provider: Optional[str] = None,
        output: Optional[Console] = None,
    ):
        """Initialize the DNS manager from a config path or an already loaded config."""
        self.config = config if isinstance(config, dict) else load_config(config)
        self.console = output or console
        self.dns_client = DNSClient(self.config, provider)
        self.record_manager = RecordManager(self.dns_client)

    @property
    def provider_name(self) -> str:
        return self.dns_client.provider_name

    def list_zones(self) -> bool:
        """Print every zone in the account."""
        try:
            with self.console.status("Fetching zones..."):
                zones = self.record_manager.list_zones()
        except DNSError as e:
            return self._fail(e)

        if not zones:
            self.console.print(f"[yellow]No zones found in your {self.provider_name} account[/yellow]")
            return True

        table = Table(title=f"{self.provider_name} zones")
        table.add_column("Zone", style="cyan")
        table.add_column("ID", style="magenta")
        for zone in zones:
            table.add_row(zone.name, zone.id)
        self.console.print(table)
        return True

    def list_records(self, zone: str, record_type: Optional[str] = None) -> bool:
        """Print the records of a zone."""
        try:
            with self.console.status("Fetching DNS records..."):
                handle, records = self.record_manager.list_records(zone, record_type)
        except DNSError as e:
            return self._fail(e)

        if not records:
            what = f"{record_type.upper()} records" if record_type else "DNS records"
            self.console.print(f"[yellow]No {what} found for '{handle.name}'[/yellow]")
            return True

        self._display_records(records, handle)

        options = {"zone": handle.name}
        if record_type:
            options["type"] = record_type.upper()
        self._command_replay("list", options)
        return True

    def set_record(
        self,
        zone: str,
        record_type: str,
        name: str,
        value: str,
        ttl: Optional[int] = None,
        extras: Optional[Dict] = None,
    ) -> bool:
        """Create or update a record."""
        try:
            with self.console.status("Setting DNS record..."):
                handle, result = self.record_manager.set_record(
                    zone, record_type, name, value, ttl, extras
                )
        except DNSError as e:
            return self._fail(e)

        self.console.print(f"[green]DNS record {result.action} successfully[/green]")
        if result.id:
            self.console.print(f"[blue]ID: {result.id}[/blue]")

        options = {"zone": handle.name, "type": record_type.upper(), "name": name, "value": value}
        if ttl is not None:
            options["ttl"] = ttl
        for key, extra in (extras or {}).items():
            if extra is not None and extra is not False:
                options[key] = extra
        self._command_replay("set", options)
        return True

    def delete_record(
        self,
        zone: str,
        record_type: str,
        name: str,
        force: bool = False,
        yes: bool = False,
    ) -> bool:
        """Find, show, confirm and delete a record."""
        try:
            with self.console.status("Finding DNS record..."):
                handle, record = self.record_manager.find_record(zone, record_type, name)

            if record is None:
                self.console.print(
                    f"[red]No {record_type.upper()} record found for '{name}' in zone '{handle.name}'[/red]"
                )
                return False

            self._display_records([record], handle)

            confirmed = self._confirm_deletion(record.name, force, yes)
            if confirmed is None:
                return False
            if not confirmed:
                self.console.print("[yellow]Cancelled deleting DNS record[/yellow]")
                return True

            with self.console.status("Deleting DNS record..."):
                deleted = self.record_manager.delete_record(zone, record_type, name, record)
        except DNSError as e:
            return self._fail(e)

        if deleted:
            self.console.print("[green]DNS record deleted successfully[/green]")
        else:
            self.console.print("[yellow]DNS record was already deleted[/yellow]")

        self._command_replay(
            "delete",
            {"zone": handle.name, "type": record_type.upper(), "name": name, "force": True, "yes": True},
        )
        return True

    def _display_records(self, records: List[DnsRecord], zone: ZoneHandle):
        table = Table(title=f"DNS records for {zone.name}")
        table.add_column("Type", style="cyan")
        table.add_column("Name", style="magenta")
        table.add_column("Value", style="white")
        table.add_column("TTL", style="green")

        show_proxied = any(record.proxied is not None for record in records)
        show_priority = any(record.priority is not None for record in records)
        if show_priority:
            table.add_column("Priority")
        if show_proxied:
            table.add_column("Proxied")

        for record in records:
            row = [
                record.type,
                escape(record.name),
                escape(truncate_value(record.value)),
                self._format_ttl(record),
            ]
            if show_priority:
                row.append("" if record.priority is None else str(record.priority))
            if show_proxied:
                row.append("" if record.proxied is None else ("Yes" if record.proxied else "No"))
            table.add_row(*row)

        self.console.print(table)

    def _format_ttl(self, record: DnsRecord) -> str:
        if record.is_alias:
            return "-"
        if self.record_manager.service.AUTO_TTL == record.ttl:
            return "auto"
        return f"{record.ttl}s"

    def _confirm_deletion(self, record_name: str, force: bool, yes: bool) -> Optional[bool]:
        """
        Two-step confirmation: type the record name, then yes/no.

        Returns True if confirmed, False if cancelled and None when the typed
        name did not match.
        """
        if not force:
            typed = Prompt.ask(
                f"Type the record name '{record_name}' to confirm deletion", console=self.console
            )
            if typed.strip() != record_name:
                self.console.print("[red]Record name does not match. Deletion cancelled.[/red]")
                return None

        if yes:
            return True
        return Confirm.ask("Are you absolutely sure?", default=False, console=self.console)

    def _command_replay(self, command: str, options: Dict):
        """Print the non-interactive form of the command that just ran."""
        parts = ["clouddns", "--provider", self.provider_name, command]
        for key, value in options.items():
            flag = f"--{key.replace('_', '-')}"
            if value is True:
                parts.append(flag)
            else:
                parts.append(f"{flag} {_shell_quote(str(value))}")
        self.console.print(f"\n[dim]Non-interactive command:[/dim] {escape(' '.join(parts))}", highlight=False)

    def _fail(self, error: DNSError) -> bool:
        logger.error(f"{type(error).__name__}: {error}")
        self.console.print(f"[red]Error: {escape(str(error))}[/red]")
        return False


def _shell_quote(value: str) -> str:
    if value and all(char.isalnum() or char in "@._-:/*" for char in value):
        return value
    return "'" + value.replace("'", "'\"'\"'") + "'"
