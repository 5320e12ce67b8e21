"""
Logging setup module for the address query engine.

This script initializes a logger named 'address_query' with both a console
stream handler (for real-time feedback while running the CLI) and a rotating
file handler (for persistent logs). Logs are saved in a 'logs/' directory
located three levels above the current file (at the project root).

Library modules log through ``logging.getLogger(__name__)``, which makes them
children of this logger, so importing this module once (the CLI and the
batch pipeline do) is enough to route everything to both handlers.

Usage:
    from address_query.utils.logging_setup import logger
    logger.info("Message to log")
"""

import os
import logging
from logging.handlers import RotatingFileHandler

from address_query.config.settings import logging_config

# ---------------------------------------------------------------------
# 1) Create logs folder (relative to project root, not inside src/)
# ---------------------------------------------------------------------
LOG_DIR = os.path.abspath(
    os.path.join(os.path.dirname(__file__), '..', '..', '..', 'logs')
)
os.makedirs(LOG_DIR, exist_ok=True)

LOG_FORMAT = '%(asctime)s %(levelname)-8s [%(name)s] %(message)s'

# ---------------------------------------------------------------------
# 2) Set up named logger for the application
# ---------------------------------------------------------------------
logger = logging.getLogger('address_query')
logger.setLevel(logging_config.get("level", "INFO"))

# ---------------------------------------------------------------------
# 3) Console handler
# ---------------------------------------------------------------------
if not logger.handlers:
    ch = logging.StreamHandler()
    ch.setLevel(logging.DEBUG)
    ch.setFormatter(logging.Formatter(LOG_FORMAT))
    logger.addHandler(ch)

    # -----------------------------------------------------------------
    # 4) Rotating file handler (logs written to disk with rotation)
    # -----------------------------------------------------------------
    fh = RotatingFileHandler(
        os.path.join(LOG_DIR, logging_config.get("filename", "address_query.log")),
        maxBytes=logging_config.get("max_bytes", 5 * 1024 * 1024),
        backupCount=logging_config.get("backup_count", 3),
    )
    fh.setLevel(logging.INFO)  # Only log INFO and above to file
    fh.setFormatter(logging.Formatter(LOG_FORMAT))
    logger.addHandler(fh)
