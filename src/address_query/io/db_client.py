from __future__ import annotations

import os
from typing import Optional

import psycopg2
from dotenv import load_dotenv

from address_query.config.settings import DSN_ENV_VAR


def get_connection(dsn: Optional[str] = None):
    """
    Open a PostgreSQL connection for the address search layer.

      Environment variables (a .env file is honoured):
          DATABASE_URL

      Args:
          dsn: Optional override for the connection string.

      Returns:
          psycopg2 connection.

      Raises:
          RuntimeError: If no DSN is configured.
    """
    load_dotenv()
    database_url = dsn or os.getenv(DSN_ENV_VAR)

    if not database_url:
        raise RuntimeError(
            f"Database DSN not set. Set {DSN_ENV_VAR} in your environment."
        )

    return psycopg2.connect(database_url)
