#!/usr/bin/env python3
"""
Cloud DNS Manager - Demo Script

This script demonstrates the functionality of the Cloud DNS Manager
using the mock provider for safe testing and demonstration.
"""

from rich.console import Console
from rich.panel import Panel

from clouddns.core.dns_manager import DNSManager
from clouddns.utils.config import get_default_config

# Initialize rich console
console = Console()

DEMO_ZONE = "ib.bigbank.com"

DEMO_RECORDS = [
    ("A", "web1", "10.33.1.10", None),
    ("A", "web2", "10.33.1.11", None),
    ("CNAME", "www", "web1.ib.bigbank.com", None),
    ("MX", "@", "mail.ib.bigbank.com", {"priority": 10}),
    ("TXT", "@", "v=spf1 mx -all", None),
    ("SRV", "_sip._tcp", "10 5 5060 sip.ib.bigbank.com", None),
    ("CAA", "@", "letsencrypt.org", None),
]


def create_demo_config():
    """Create a demo configuration using the mock provider."""
    config = get_default_config()
    config["dns_providers"]["mock"] = {"zones": [DEMO_ZONE, "bigbank.com"]}
    return config


def display_demo_header():
    """Display the demo header."""
    console.print(
        Panel.fit(
            "[bold blue]Cloud DNS Manager - Demo[/bold blue]\n"
            f"[cyan]DNS record management for {DEMO_ZONE} on the mock provider[/cyan]",
            border_style="blue",
        )
    )
    console.print()


def run_demo():
    display_demo_header()
    dns_manager = DNSManager(create_demo_config(), output=console)

    console.print("[bold]Step 1: Zones in the account[/bold]")
    dns_manager.list_zones()

    console.print("\n[bold]Step 2: Create records[/bold]")
    for record_type, name, value, extras in DEMO_RECORDS:
        dns_manager.set_record(DEMO_ZONE, record_type, name, value, extras=extras)

    console.print("\n[bold]Step 3: Update a record[/bold]")
    dns_manager.set_record(DEMO_ZONE, "A", "web2", "10.33.1.12", ttl=600)

    console.print("\n[bold]Step 4: Invalid input is rejected[/bold]")
    dns_manager.set_record(DEMO_ZONE, "A", "web3", "10.33.1.999")

    console.print("\n[bold]Step 5: Delete a record[/bold]")
    dns_manager.delete_record(DEMO_ZONE, "A", "web1", force=True, yes=True)

    console.print("\n[bold]Step 6: Final zone state[/bold]")
    dns_manager.list_records(DEMO_ZONE)

    console.print("\n[green]Demo completed[/green]")


if __name__ == "__main__":
    run_demo()
