"""
CLI main entry point.
"""

import argparse
import logging
import sys
from datetime import date
from pathlib import Path

import yaml

from ..config import Config, ConfigValidationError, create_default_config, load_config
from ..pluggy_client import (
    PluggyClient,
    PluggyError,
    PluggyValidationError,
    PollingCancelledError,
    PollingTimeoutError,
)
from ..schemas import (
    AccountType,
    ConnectorParameters,
    InvestmentType,
    Item,
    ItemParameters,
    ItemStatus,
    TransactionParameters,
    WebhookEvent,
)

logger = logging.getLogger(__name__)


def setup_logging(verbose: bool = False) -> None:
    """Configure logging."""
    level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(
        level=level,
        format="%(asctime)s | %(levelname)-8s | %(name)s | %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )


def _key_value(raw: str) -> tuple[str, str]:
    """Parse a KEY=VALUE credential argument."""
    key, sep, value = raw.partition("=")
    if not sep or not key:
        raise argparse.ArgumentTypeError(f"expected KEY=VALUE, got {raw!r}")
    return key, value


def create_cli() -> argparse.ArgumentParser:
    """Create CLI argument parser."""
    parser = argparse.ArgumentParser(
        prog="pluggy",
        description="Query the Pluggy API: connectors, items, accounts and more",
    )

    parser.add_argument(
        "-c",
        "--config",
        type=Path,
        default=Path("config.yaml"),
        help="Path to config file (default: config.yaml)",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Enable verbose logging",
    )

    subparsers = parser.add_subparsers(dest="command", help="Command to run")

    # init-config command
    subparsers.add_parser("init-config", help="Write a default config file")

    # connectors command
    connectors_parser = subparsers.add_parser("connectors", help="List available connectors")
    connectors_parser.add_argument("--name", type=str, help="Filter by connector name")
    connectors_parser.add_argument(
        "--country",
        action="append",
        default=[],
        help="Filter by country code (repeatable)",
    )
    connectors_parser.add_argument(
        "--sandbox",
        action="store_true",
        help="Include sandbox connectors",
    )

    connector_parser = subparsers.add_parser("connector", help="Show one connector")
    connector_parser.add_argument("connector_id", type=int)

    # connect command
    connect_parser = subparsers.add_parser(
        "connect", help="Create an item and wait until the connection finishes"
    )
    connect_parser.add_argument("--connector-id", type=int, required=True)
    connect_parser.add_argument(
        "--param",
        type=_key_value,
        action="append",
        default=[],
        metavar="KEY=VALUE",
        help="Connector credential (repeatable)",
    )
    connect_parser.add_argument("--webhook-url", type=str, help="Webhook for item events")
    connect_parser.add_argument(
        "--timeout",
        type=float,
        help="Give up after this many seconds (default: config poll_timeout)",
    )

    item_parser = subparsers.add_parser("item", help="Show one item")
    item_parser.add_argument("item_id")

    delete_item_parser = subparsers.add_parser("delete-item", help="Delete an item")
    delete_item_parser.add_argument("item_id")

    # accounts command
    accounts_parser = subparsers.add_parser("accounts", help="List accounts of an item")
    accounts_parser.add_argument("item_id")
    accounts_parser.add_argument(
        "--type",
        choices=[t.value for t in AccountType],
        help="Only BANK or CREDIT accounts",
    )

    # transactions command
    transactions_parser = subparsers.add_parser(
        "transactions", help="List transactions of an account"
    )
    transactions_parser.add_argument("account_id")
    transactions_parser.add_argument(
        "--from", dest="date_from", type=date.fromisoformat, help="Start date (YYYY-MM-DD)"
    )
    transactions_parser.add_argument(
        "--to", dest="date_to", type=date.fromisoformat, help="End date (YYYY-MM-DD)"
    )
    transactions_parser.add_argument("--page-size", type=int, help="Results per page")
    transactions_parser.add_argument("--page", type=int, help="Page number")

    # investments command
    investments_parser = subparsers.add_parser("investments", help="List investments of an item")
    investments_parser.add_argument("item_id")
    investments_parser.add_argument(
        "--type",
        choices=[t.value for t in InvestmentType],
        help="Only investments of this kind",
    )

    # categories command
    categories_parser = subparsers.add_parser("categories", help="List categories")
    categories_parser.add_argument("--parent-id", type=str, help="Only children of this category")

    # webhook commands
    subparsers.add_parser("webhooks", help="List webhooks")

    create_webhook_parser = subparsers.add_parser("create-webhook", help="Register a webhook")
    create_webhook_parser.add_argument("url")
    create_webhook_parser.add_argument("event", choices=[e.value for e in WebhookEvent])

    delete_webhook_parser = subparsers.add_parser("delete-webhook", help="Delete a webhook")
    delete_webhook_parser.add_argument("webhook_id")

    return parser


def _print_item(item: Item) -> None:
    status = item.status.value if item.status else "UNKNOWN"
    connector = f" ({item.connector.name})" if item.connector else ""
    print(f"  🔗 [{item.id}]{connector} status={status}")
    if item.execution_status:
        print(f"     → Execution: {item.execution_status}")
    if item.error:
        print(f"     → Error: {item.error.code}: {item.error.message}")
        if item.error.provider_message:
            print(f"     → Institution said: {item.error.provider_message}")


def cmd_init_config(config_path: Path) -> int:
    """Write a default config file."""
    if config_path.exists():
        print(f"❌ {config_path} already exists")
        return 1
    create_default_config(config_path)
    print(f"✓ Wrote {config_path}")
    return 0


def cmd_connectors(
    client: PluggyClient, name: str | None, countries: list[str], sandbox: bool
) -> int:
    """List connectors."""
    params = ConnectorParameters(
        name=name,
        countries=countries,
        include_sandbox=True if sandbox else None,
    )
    page = client.fetch_connectors(params)

    for connector in page:
        kind = connector.type.value if connector.type else "?"
        print(f"  🏦 [{connector.id}] {connector.name} ({kind}, {connector.country or '-'})")

    print(f"\n✓ {page.total} connector(s)")
    return 0


def cmd_connector(client: PluggyClient, connector_id: int) -> int:
    """Show one connector and the credentials it asks for."""
    connector = client.fetch_connector(connector_id)

    print(f"🏦 [{connector.id}] {connector.name}")
    print(f"  Type:    {connector.type.value if connector.type else '-'}")
    print(f"  Country: {connector.country or '-'}")
    print(f"  MFA:     {'yes' if connector.has_mfa else 'no'}")
    print("  Credentials:")
    for credential in connector.credentials:
        optional = " (optional)" if credential.optional else ""
        print(f"    - {credential.name}: {credential.label}{optional}")
    return 0


def cmd_connect(
    client: PluggyClient,
    connector_id: int,
    params: list[tuple[str, str]],
    webhook_url: str | None,
    timeout: float | None,
) -> int:
    """Create an item and wait for it to finish."""
    print(f"🔌 Connecting to connector {connector_id}...")

    item_params = ItemParameters(
        connector_id=connector_id,
        parameters=dict(params),
        webhook_url=webhook_url,
    )

    try:
        item = client.execute_and_wait(item_params, timeout=timeout)
    except PollingTimeoutError as e:
        print(f"⏱ Gave up after {e.timeout}s")
        _print_item(e.item)
        return 1
    except PollingCancelledError as e:
        print("⏹ Cancelled")
        _print_item(e.item)
        return 1

    _print_item(item)

    if item.status == ItemStatus.UPDATED:
        print("\n✓ Connected")
        return 0

    print("\n❌ Connection did not succeed")
    return 1


def cmd_item(client: PluggyClient, item_id: str) -> int:
    _print_item(client.fetch_item(item_id))
    return 0


def cmd_delete_item(client: PluggyClient, item_id: str) -> int:
    client.delete_item(item_id)
    print(f"✓ Deleted item {item_id}")
    return 0


def cmd_accounts(client: PluggyClient, item_id: str, account_type: str | None) -> int:
    """List accounts of an item."""
    page = client.fetch_accounts(
        item_id, AccountType(account_type) if account_type else None
    )

    for account in page:
        kind = account.type.value if account.type else "?"
        print(
            f"  💳 [{account.id}] {account.name} ({kind}) "
            f"{account.balance:.2f} {account.currency_code or ''}".rstrip()
        )

    print(f"\n✓ {page.total} account(s)")
    return 0


def cmd_transactions(
    client: PluggyClient,
    account_id: str,
    date_from: date | None,
    date_to: date | None,
    page_size: int | None,
    page_number: int | None,
) -> int:
    """List one page of transactions."""
    page = client.fetch_transactions(
        account_id,
        TransactionParameters(
            date_from=date_from,
            date_to=date_to,
            page_size=page_size,
            page=page_number,
        ),
    )

    for tx in page:
        tx_date = tx.date.date().isoformat() if tx.date else "----------"
        print(f"  {tx_date}  {tx.amount:>12.2f}  {tx.description}")

    print(f"\n✓ Page {page.page}/{page.total_pages}, {page.total} transaction(s) total")
    return 0


def cmd_investments(client: PluggyClient, item_id: str, investment_type: str | None) -> int:
    """List investments of an item."""
    page = client.fetch_investments(
        item_id, InvestmentType(investment_type) if investment_type else None
    )

    for investment in page:
        kind = investment.type.value if investment.type else "?"
        print(f"  📈 [{investment.id}] {investment.name} ({kind}) {investment.balance:.2f}")

    print(f"\n✓ {page.total} investment(s)")
    return 0


def cmd_categories(client: PluggyClient, parent_id: str | None) -> int:
    page = client.fetch_categories(parent_id)

    for category in page:
        parent = f" ← {category.parent_description}" if category.parent_description else ""
        print(f"  🏷 [{category.id}] {category.description}{parent}")

    print(f"\n✓ {page.total} categor{'y' if page.total == 1 else 'ies'}")
    return 0


def cmd_webhooks(client: PluggyClient) -> int:
    page = client.fetch_webhooks()

    for webhook in page:
        event = webhook.event.value if webhook.event else "?"
        print(f"  🪝 [{webhook.id}] {event} → {webhook.url}")

    print(f"\n✓ {page.total} webhook(s)")
    return 0


def cmd_create_webhook(client: PluggyClient, url: str, event: str) -> int:
    webhook = client.create_webhook(url, WebhookEvent(event))
    print(f"✓ Created webhook {webhook.id}")
    return 0


def cmd_delete_webhook(client: PluggyClient, webhook_id: str) -> int:
    client.delete_webhook(webhook_id)
    print(f"✓ Deleted webhook {webhook_id}")
    return 0


def run_command(parsed: argparse.Namespace, config: Config, client: PluggyClient) -> int:
    """Route a parsed command to its handler."""
    if parsed.command == "connectors":
        return cmd_connectors(client, parsed.name, parsed.country, parsed.sandbox)
    elif parsed.command == "connector":
        return cmd_connector(client, parsed.connector_id)
    elif parsed.command == "connect":
        timeout = parsed.timeout if parsed.timeout is not None else config.pluggy.poll_timeout
        return cmd_connect(client, parsed.connector_id, parsed.param, parsed.webhook_url, timeout)
    elif parsed.command == "item":
        return cmd_item(client, parsed.item_id)
    elif parsed.command == "delete-item":
        return cmd_delete_item(client, parsed.item_id)
    elif parsed.command == "accounts":
        return cmd_accounts(client, parsed.item_id, parsed.type)
    elif parsed.command == "transactions":
        return cmd_transactions(
            client,
            parsed.account_id,
            parsed.date_from,
            parsed.date_to,
            parsed.page_size,
            parsed.page,
        )
    elif parsed.command == "investments":
        return cmd_investments(client, parsed.item_id, parsed.type)
    elif parsed.command == "categories":
        return cmd_categories(client, parsed.parent_id)
    elif parsed.command == "webhooks":
        return cmd_webhooks(client)
    elif parsed.command == "create-webhook":
        return cmd_create_webhook(client, parsed.url, parsed.event)
    elif parsed.command == "delete-webhook":
        return cmd_delete_webhook(client, parsed.webhook_id)
    else:
        print(f"❌ Unknown command: {parsed.command}")
        return 1


def main(args: list[str] | None = None) -> int:
    """Main entry point."""
    parser = create_cli()
    parsed = parser.parse_args(args)

    setup_logging(parsed.verbose)

    if not parsed.command:
        parser.print_help()
        return 1

    if parsed.command == "init-config":
        return cmd_init_config(parsed.config)

    # Load config
    try:
        config = load_config(parsed.config)
        config.require_valid()
    except (ConfigValidationError, OSError, yaml.YAMLError) as e:
        print(f"❌ Failed to load config: {e}")
        return 1

    client = PluggyClient.from_config(config.pluggy)
    try:
        return run_command(parsed, config, client)
    except PluggyValidationError as e:
        print(f"❌ Request rejected: {e.message}")
        for detail in e.errors:
            print(f"   - {detail.parameter or '(request)'}: {detail.message}")
        return 1
    except PluggyError as e:
        logger.debug("Command failed", exc_info=True)
        print(f"❌ {e}")
        return 1
    finally:
        client.close()


if __name__ == "__main__":
    sys.exit(main())
