import logging
import os
import sys

from exceptions import LedgerError
from payments_engine import PaymentsEngine, write_accounts

LOG_LEVEL_ENV = "LEDGER_LOG_LEVEL"

logger = logging.getLogger(__name__)


def resolve_log_level(value) -> int:
    """Accept a level name ("INFO") or number ("20"); fall back to WARNING."""
    if not value:
        return logging.WARNING
    value = value.strip().upper()
    if value.isdigit():
        return int(value)
    level = getattr(logging, value, None)
    if isinstance(level, int):
        return level
    return logging.WARNING


def configure_logging() -> None:
    logging.basicConfig(
        level=resolve_log_level(os.getenv(LOG_LEVEL_ENV)),
        format="%(levelname)s: %(message)s",
        stream=sys.stderr,
    )


def main(argv=None) -> int:
    argv = sys.argv if argv is None else argv
    configure_logging()

    if len(argv) != 2:
        print("Usage: python main.py <input.csv>", file=sys.stderr)
        return 1

    filepath = argv[1]
    engine = PaymentsEngine()
    try:
        accounts = engine.process_file(filepath)
    except (LedgerError, OSError) as e:
        logger.error(f"Aborting run: {e}")
        return 1

    write_accounts(accounts, sys.stdout)
    return 0


if __name__ == "__main__":
    sys.exit(main())
