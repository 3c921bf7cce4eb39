#!/usr/bin/env python3
"""
Cloud DNS Manager - Command Line Interface

Main entry point for the clouddns CLI. Options left out on the command
line are prompted for interactively.
"""

import argparse
import logging
import sys
from typing import Dict, Optional

from rich.console import Console
from rich.markup import escape
from rich.prompt import Prompt

from ..core.dns_manager import DNSManager
from ..exceptions import DNSError
from ..utils.config import DEFAULT_CONFIG_PATH, config_logger, load_config

console = Console()
logger = logging.getLogger(__name__)

VALUE_PLACEHOLDERS = {
    "A": "192.0.2.1",
    "AAAA": "2001:db8::1",
    "CNAME": "target.example.com",
    "MX": "10 mail.example.com",
    "TXT": "v=spf1 include:_spf.example.com ~all",
    "NS": "ns1.example.com",
    "SRV": "10 5 5060 sip.example.com",
    "CAA": "0 issue \"letsencrypt.org\"",
    "PTR": "host.example.com",
}


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="clouddns",
        description="Cloud DNS Manager - Manage DNS records on Route53, Cloudflare and DigitalOcean",
    )

    parser.add_argument(
        "--config",
        "-c",
        default=DEFAULT_CONFIG_PATH,
        help=f"Configuration file path (default: {DEFAULT_CONFIG_PATH})",
    )
    parser.add_argument(
        "--provider",
        "-p",
        help="DNS provider: aws, cloudflare, digitalocean or mock (default: from config)",
    )
    parser.add_argument(
        "--verbose", "-v", action="store_true", help="Enable verbose logging"
    )

    subparsers = parser.add_subparsers(dest="command", metavar="COMMAND")

    subparsers.add_parser("zones", help="List zones in the account")

    list_parser = subparsers.add_parser("list", help="List DNS records in a zone")
    list_parser.add_argument("--zone", "-z", help="Zone ID or domain name")
    list_parser.add_argument("--type", "-t", dest="record_type", help="Only show this record type")

    set_parser = subparsers.add_parser("set", help="Create or update a DNS record")
    set_parser.add_argument("--zone", "-z", help="Zone ID or domain name")
    set_parser.add_argument("--type", "-t", dest="record_type", help="Record type")
    set_parser.add_argument("--name", "-n", help="Record name, \"@\" for the zone apex")
    set_parser.add_argument("--value", help="Record value")
    set_parser.add_argument("--ttl", type=int, help="TTL in seconds")
    set_parser.add_argument(
        "--proxied",
        action=argparse.BooleanOptionalAction,
        default=None,
        help="Route traffic through the Cloudflare proxy (A, AAAA and CNAME only)",
    )
    set_parser.add_argument("--priority", type=int, help="MX/SRV priority")
    set_parser.add_argument("--weight", type=int, help="SRV weight")
    set_parser.add_argument("--port", type=int, help="SRV port")
    set_parser.add_argument("--flags", type=int, help="CAA flags")
    set_parser.add_argument("--tag", help="CAA tag: issue, issuewild or iodef")

    delete_parser = subparsers.add_parser("delete", help="Delete a DNS record")
    delete_parser.add_argument("--zone", "-z", help="Zone ID or domain name")
    delete_parser.add_argument("--type", "-t", dest="record_type", help="Record type")
    delete_parser.add_argument("--name", "-n", help="Record name, \"@\" for the zone apex")
    delete_parser.add_argument(
        "--force", "-f", action="store_true", help="Skip typing the record name to confirm"
    )
    delete_parser.add_argument(
        "--yes", "-y", action="store_true", help="Skip the final yes/no confirmation"
    )

    return parser


def prompt_missing(value: Optional[str], label: str, default: Optional[str] = None) -> str:
    """Return the value or ask for it."""
    while not value:
        value = Prompt.ask(label, default=default, console=console)
    return value


def prompt_record_type(value: Optional[str], record_types: tuple) -> str:
    if value:
        return value
    return Prompt.ask("Record type", choices=list(record_types), default=record_types[0], console=console)


def collect_extras(args) -> Dict:
    return {
        key: getattr(args, key)
        for key in ("proxied", "priority", "weight", "port", "flags", "tag")
        if getattr(args, key) is not None
    }


def run(args, dns_manager: DNSManager) -> bool:
    """Dispatch the parsed command to the DNS manager."""
    if args.command == "zones":
        return dns_manager.list_zones()

    zone = prompt_missing(args.zone, "Zone (ID or domain)")

    if args.command == "list":
        return dns_manager.list_records(zone, args.record_type)

    record_types = dns_manager.record_manager.record_types
    record_type = prompt_record_type(args.record_type, record_types)
    name = prompt_missing(args.name, "Record name (\"@\" for root)", default="@")

    if args.command == "set":
        placeholder = VALUE_PLACEHOLDERS.get(record_type.upper(), "")
        value = prompt_missing(args.value, f"Record value (e.g. {placeholder})")
        return dns_manager.set_record(zone, record_type, name, value, args.ttl, collect_extras(args))

    return dns_manager.delete_record(zone, record_type, name, force=args.force, yes=args.yes)


def main(argv=None):
    """Main CLI entry point."""
    parser = build_parser()
    args = parser.parse_args(argv)

    if not args.command:
        parser.print_help()
        sys.exit(1)

    try:
        config = load_config(args.config)
        config_logger(config, args.verbose)
        dns_manager = DNSManager(config, args.provider)
        success = run(args, dns_manager)
    except DNSError as e:
        logger.error(f"{type(e).__name__}: {e}")
        console.print(f"[red]Error: {escape(str(e))}[/red]")
        sys.exit(1)
    except KeyboardInterrupt:
        console.print("\n[yellow]Aborted[/yellow]")
        sys.exit(1)

    sys.exit(0 if success else 1)


if __name__ == "__main__":
    main()
