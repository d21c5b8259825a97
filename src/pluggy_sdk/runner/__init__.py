"""
CLI runner module.

Provides commands:
- connectors / connector: Browse institutions
- connect: Create an item and wait for the connection to finish
- item / delete-item: Inspect or remove items
- accounts / transactions / investments / categories: Read data
- webhooks / create-webhook / delete-webhook: Manage webhooks
"""

from .main import create_cli, main

__all__ = [
    "create_cli",
    "main",
]
