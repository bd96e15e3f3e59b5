# main.py

"""Entry point for the Steal Deals terminal storefront."""

import argparse
import logging

from src.config.logging_config import setup_logging

logger = logging.getLogger("steal_deals.main")


def _build_parser() -> argparse.ArgumentParser:
    """Build the argument parser for the launcher."""
    parser = argparse.ArgumentParser(
        prog="steal_deals",
        description="Handpicked deals with affiliate links, in your terminal.",
        epilog=(
            "Backend connection is read from STEAL_DEALS_BACKEND_URL and "
            "STEAL_DEALS_BACKEND_ANON_KEY (a .env file is honoured)."
        ),
    )
    parser.add_argument(
        "--admin",
        action="store_true",
        default=False,
        help="Open the admin console on launch (sign-in and admin role required).",
    )
    return parser


def main() -> None:
    """Launch the storefront, or the admin console with ``--admin``."""
    log_file = setup_logging()
    logger.info("steal_deals starting, log file: %s", log_file)

    args = _build_parser().parse_args()

    from src.ui.app import StealDealsApp

    try:
        app = StealDealsApp(open_admin=args.admin)
        app.run()
    except Exception:
        logger.critical("Fatal error during TUI run", exc_info=True)
        raise
    finally:
        logger.info("steal_deals shutting down")


if __name__ == "__main__":
    main()
