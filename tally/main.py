"""Composition root for the Tally pricing system.

This module is the ONLY location that imports both core domain logic
and concrete adapter implementations. All wiring of dependencies
happens here, creating a clear entry point for the application.

Module Structure:
- Configuration loading via config module
- Adapter instantiation
- Core service initialization
- Dependency injection
- Interactive CLI loop
"""

import asyncio
import json
import logging
import sys

from tally.adapters.catalog.memory import InMemoryCatalogAdapter
from tally.adapters.cli.commands import CLICommandHandler, run_command
from tally.adapters.receipt.stdout import StdoutReceiptSink
from tally.config import Settings, load_settings
from tally.core.order_service import OrderDraftService


async def _run_cli_interactive(cli_handler: CLICommandHandler) -> None:
    """Run interactive CLI loop.

    Provides a REPL-like interface for editing the draft order.

    Args:
        cli_handler: CLICommandHandler instance for executing commands.
    """
    logger = logging.getLogger(__name__)
    logger.info("Starting interactive CLI. Type 'help' for available commands or 'exit' to quit.")

    loop = asyncio.get_running_loop()

    while True:
        try:
            # Read command from stdin in a thread to avoid blocking
            command_line = await loop.run_in_executor(None, input, "tally> ")
            command_line = command_line.strip()

            if not command_line:
                continue

            if command_line.lower() == "exit":
                logger.info("Exiting CLI")
                break

            if command_line.lower() == "help":
                _print_cli_help()
                continue

            parts = command_line.split(maxsplit=1)
            command = parts[0].lower()
            args_str = parts[1] if len(parts) > 1 else ""

            try:
                args = json.loads(args_str) if args_str else {}
            except json.JSONDecodeError:
                logger.error("Invalid JSON arguments. Use 'help' for command syntax.")
                continue
            if not isinstance(args, dict):
                logger.error("Arguments must be a JSON object. Use 'help' for command syntax.")
                continue

            try:
                result = await run_command(cli_handler, command, args)
                if isinstance(result.get("data"), str):
                    print(result["data"])
                else:
                    print(json.dumps(result, indent=2, default=str, ensure_ascii=False))
            except Exception as e:
                logger.error(f"Command execution error: {e}", exc_info=True)
                print(json.dumps({"status": "error", "message": str(e)}, indent=2))

        except EOFError:
            # Ctrl+D to exit
            logger.info("EOF received, exiting CLI")
            break
        except KeyboardInterrupt:
            logger.info("Interrupted by user")
            continue


def _print_cli_help() -> None:
    """Print CLI help message."""
    help_text = """
Available Commands (JSON format):

  products
    List catalog products. Optional: term, limit
    Example: products {"term": "rice"}

  add
    Add a catalog product to the order.
    Required: product_id   Optional: quantity
    Example: add {"product_id": "P-1001", "quantity": 2}

  custom
    Add a line that is not in the catalog.
    Required: unit_price   Optional: quantity, discount_percent, tax_percent, product_name
    Example: custom {"unit_price": "100", "quantity": 2, "discount_percent": 10, "tax_percent": 5}

  update
    Change a line's unit_price, quantity, discount_percent or tax_percent.
    Required: index
    Example: update {"index": 0, "quantity": 3}

  remove
    Remove a line.
    Required: index
    Example: remove {"index": 0}

  adjust
    Set order discount %, order tax % and shipping.
    Example: adjust {"discount": 10, "tax": 8, "shipping": 20}

  totals
    Show lines and totals. Optional: format (json, text)
    Example: totals {"format": "text"}

  pay
    Record a payment. Required: amount   Optional: method, received, reference
    Example: pay {"amount": "100", "method": "Cash", "received": "200"}

  submit
    Print the receipt and start a new order.

  reset
    Discard the current order.

  stock
    Value a stock adjustment.
    Example: stock {"stock_in_hand": 40, "adjusted_by": -5, "unit_cost": "12.50"}

  help
    Show this help message.

  exit
    Exit the CLI.

Note: All commands accept arguments as a single JSON object.
Provide the JSON after the command name on the same line.
    """
    print(help_text)


def configure_logging(log_level: str, log_format: str) -> None:
    """Configure application logging.

    Args:
        log_level: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL).
        log_format: Log format (json, text).
    """
    level = getattr(logging, log_level, logging.INFO)

    if log_format == "json":
        format_str = '{"time": "%(asctime)s", "level": "%(levelname)s", "name": "%(name)s", "message": "%(message)s"}'
    else:
        format_str = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

    logging.basicConfig(
        level=level,
        format=format_str,
        handlers=[
            logging.StreamHandler(sys.stderr),
        ],
    )


def build_handler(settings: Settings) -> CLICommandHandler:
    """Instantiate adapters and core services and wire them together.

    Raises:
        FileNotFoundError: If catalog_path points to a missing file.
        ValueError: If the catalog file is malformed.
    """
    logger = logging.getLogger(__name__)

    if settings.catalog_path:
        catalog = InMemoryCatalogAdapter.from_json_file(settings.catalog_path)
        logger.info(f"Catalog adapter: JSON file {settings.catalog_path}")
    else:
        catalog = InMemoryCatalogAdapter()
        logger.info("Catalog adapter: built-in sample catalog")

    sink = StdoutReceiptSink(
        currency_symbol=settings.currency_symbol,
        reference_prefix=settings.reference_prefix,
        verbose=settings.debug,
    )

    draft = OrderDraftService(
        catalog=catalog,
        sink=sink,
        default_tax_percent=settings.default_tax_percent,
        max_lines=settings.max_lines_per_order,
    )

    return CLICommandHandler(draft, catalog, currency_symbol=settings.currency_symbol)


async def bootstrap() -> None:
    """Load configuration, wire adapters, and start the CLI.

    Steps:
    1. Load configuration from environment
    2. Configure logging
    3. Instantiate adapters and core services
    4. Run the interactive CLI
    """
    settings = load_settings()

    configure_logging(settings.log_level, settings.log_format)
    logger = logging.getLogger(__name__)
    logger.info("Loading Tally...")

    cli_handler = build_handler(settings)
    await _run_cli_interactive(cli_handler)


def main() -> None:
    """Application entry point.

    Exit codes:
        0: Successful shutdown
        1: Fatal bootstrap or runtime error
        130: Interrupted by user (SIGINT/KeyboardInterrupt)
    """
    logger = logging.getLogger(__name__)
    try:
        asyncio.run(bootstrap())
    except KeyboardInterrupt:
        logger.warning("Shutdown requested by user (SIGINT)")
        sys.exit(130)
    except Exception as e:
        logger.error(f"Fatal error: {e}", exc_info=True)
        sys.exit(1)


if __name__ == "__main__":
    main()
