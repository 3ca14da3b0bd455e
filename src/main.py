import logging
import os
import sys

from payments_engine import PaymentsEngine

LOG_LEVEL_ENV = "PAYMENTS_LOG_LEVEL"


def configure_logging() -> None:
    level = os.environ.get(LOG_LEVEL_ENV, "WARNING").upper()
    logging.basicConfig(
        level=getattr(logging, level, logging.WARNING),
        format="%(levelname)s: %(message)s",
        stream=sys.stderr,
    )


def main(argv=None) -> int:
    argv = sys.argv[1:] if argv is None else argv
    configure_logging()

    if len(argv) != 1:
        print("Usage: payments <input.csv>", file=sys.stderr)
        return 1

    filepath = argv[0]
    engine = PaymentsEngine()
    try:
        engine.process_file(filepath)
    except OSError as e:
        print(f"Unable to read {filepath}: {e}", file=sys.stderr)
        return 1

    engine.write_accounts(sys.stdout)
    print(engine.stats, file=sys.stderr)
    return 0


if __name__ == "__main__":
    sys.exit(main())
