# Licensed under the Apache License, Version 2.0
import logging
import os

PACKAGE_LOGGER = "cephbridge"


def setup_logging() -> None:
    level_name = os.getenv("CEPHBRIDGE_LOG_LEVEL", "INFO").upper()
    level = getattr(logging, level_name, logging.INFO)
    fmt = "%(asctime)s %(levelname)s %(name)s: %(message)s"
    logging.basicConfig(level=level, format=fmt)


def enable_debug_tracing() -> None:
    """Turn on enter/exit tracing for this package only (fs.ceph.debug)."""
    logging.getLogger(PACKAGE_LOGGER).setLevel(logging.DEBUG)
