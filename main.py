#!/usr/bin/env python3
"""
Cloud DNS Manager - Main Entry Point

This is the main entry point for the Cloud DNS Manager.
It can be run directly or imported as a module.
"""

from clouddns.cli.main import main

if __name__ == "__main__":
    main()
