import logging
import sys

LOG_FORMAT = "%(asctime)s  %(levelname)-8s  %(name)s - %(message)s"


def configure_logging(level: str = "INFO") -> None:
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format=LOG_FORMAT,
        stream=sys.stdout,
    )
    # passlib logs a bcrypt version probe warning on first use
    for _noisy in ("passlib", "aiosmtplib", "sqlalchemy.engine"):
        logging.getLogger(_noisy).setLevel(logging.WARNING)
