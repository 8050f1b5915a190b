import os
import logging
from urllib.parse import urlparse

import psycopg2
import psycopg2.pool

logger = logging.getLogger(__name__)

# --- Database Connection Pool Configuration ---
MIN_DB_CONNECTIONS = 1
MAX_DB_CONNECTIONS = 10
db_pool = None


def get_db_connection_params():
    """Determines database connection parameters."""
    database_url = os.getenv("DATABASE_URL")
    if database_url:
        try:
            url = urlparse(database_url)
            return {
                'dbname': url.path[1:],
                'user': url.username,
                'password': url.password,
                'host': url.hostname,
                'port': url.port or 5432,
            }
        except ValueError as e:
            logger.error(f"Failed to parse DATABASE_URL: {e}. Falling back to POSTGRES_* vars.")

    return {
        'dbname': os.getenv("POSTGRES_DB"),
        'user': os.getenv("POSTGRES_USER"),
        'password': os.getenv("POSTGRES_PASSWORD"),
        'host': os.getenv("POSTGRES_HOST"),
        'port': os.getenv("POSTGRES_PORT", "5432"),
    }


def init_db_pool():
    """Initializes the database connection pool."""
    global db_pool
    if db_pool is None:
        params = get_db_connection_params()
        if not all(params.values()):
            logger.error("Database connection parameters are incomplete. Pool not initialized.")
            return
        try:
            logger.info(f"Initializing database connection pool for host '{params.get('host')}' db '{params.get('dbname')}'")
            db_pool = psycopg2.pool.SimpleConnectionPool(
                MIN_DB_CONNECTIONS,
                MAX_DB_CONNECTIONS,
                **params
            )
            logger.info("Database connection pool initialized successfully.")
        except psycopg2.OperationalError as e:
            logger.error(f"Failed to initialize database pool: {e}")
            raise


def close_db_pool():
    global db_pool
    if db_pool:
        logger.info("Closing database connection pool.")
        db_pool.closeall()
        db_pool = None


def get_db_connection():
    """Gets a connection from the database pool."""
    if db_pool is None:
        init_db_pool()
        if db_pool is None:
            logger.critical("Failed to initialize database pool. Cannot get connection.")
            raise psycopg2.pool.PoolError("Database pool not available.")
    try:
        return db_pool.getconn()
    except psycopg2.pool.PoolError as e:
        logger.error(f"Failed to get connection from pool: {e}")
        raise


def release_db_connection(conn):
    """Releases a connection back to the database pool."""
    if db_pool and conn:
        try:
            db_pool.putconn(conn)
        except psycopg2.pool.PoolError as e:
            logger.error(f"Error releasing connection back to pool: {e}")
