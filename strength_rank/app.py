from flask import Flask, request, jsonify, g
import psycopg2
import psycopg2.pool
import os
import logging
import jwt  # For JWT decoding
from functools import wraps  # For creating decorators
import atexit
from flask_limiter import Limiter
from flask_limiter.util import get_remote_address

from .db import close_db_pool
from .errors import InvalidInputError
from .store import JsonFileLiftStore, PostgresLiftStore

app = Flask(__name__)

# --- Store Configuration ---
# "json" keeps lifts in a local JSON document, "postgres" uses the hosted schema
app.config['LIFT_STORE_BACKEND'] = os.getenv("LIFT_STORE_BACKEND", "json").lower()
app.config['LIFT_STORE_PATH'] = os.getenv("LIFT_STORE_PATH", "lifts.json")

# --- Rate Limiter Configuration ---
RATELIMIT_STORAGE_URL = os.getenv("RATELIMIT_STORAGE_URL", "memory://")
limiter = Limiter(
    key_func=get_remote_address,
    default_limits=["2000 per day", "300 per hour"],
    storage_uri=RATELIMIT_STORAGE_URL,
    strategy="fixed-window",
)
limiter.init_app(app)

# --- JWT Configuration ---
# Tokens are issued elsewhere; this service only verifies them
app.config['JWT_SECRET_KEY'] = os.getenv('JWT_SECRET_KEY')

# Configure logging
logging.basicConfig(level=logging.INFO)
logger = app.logger

atexit.register(close_db_pool)


def get_store():
    """Returns the configured LiftStore, creating it on first use."""
    store = app.extensions.get('lift_store')
    if store is None:
        backend = app.config['LIFT_STORE_BACKEND']
        if backend == 'postgres':
            store = PostgresLiftStore()
        elif backend == 'json':
            store = JsonFileLiftStore(app.config['LIFT_STORE_PATH'])
        else:
            raise RuntimeError(f"Unknown LIFT_STORE_BACKEND '{backend}'")
        logger.info(f"Using '{backend}' lift store.")
        app.extensions['lift_store'] = store
    return store


# --- JWT Required Decorator ---
def jwt_required(f):
    @wraps(f)
    def decorated_function(*args, **kwargs):
        token = None
        if 'Authorization' in request.headers:
            parts = request.headers['Authorization'].split()
            if len(parts) == 2 and parts[0].lower() == 'bearer':
                token = parts[1]
            elif len(parts) == 1:  # Handle cases where 'Bearer' prefix might be missing by mistake
                token = parts[0]

        if not token:
            logger.warning("JWT token is missing")
            return jsonify(message="Authentication token is missing!"), 401

        try:
            data = jwt.decode(token, app.config['JWT_SECRET_KEY'], algorithms=["HS256"])
        except jwt.ExpiredSignatureError:
            logger.warning("JWT token has expired")
            return jsonify(message="Your token has expired. Please log in again."), 401
        except jwt.InvalidTokenError as e:
            logger.error(f"Invalid JWT token: {e}")
            return jsonify(message="Invalid token. Please log in again."), 401

        if 'user_id' not in data:
            logger.error("user_id not in JWT data after decoding.")
            return jsonify(message="Invalid token: missing user_id"), 401

        g.decoded_token_data = data
        g.current_user_id = str(data['user_id'])
        return f(*args, **kwargs)
    return decorated_function


@app.errorhandler(InvalidInputError)
def handle_invalid_input(e):
    logger.info(f"Rejected invalid input: {e}")
    return jsonify(error=str(e)), 400


@app.errorhandler(Exception)
def handle_exception(e):
    """Generic exception handler."""
    from werkzeug.exceptions import HTTPException

    if isinstance(e, HTTPException):
        return jsonify(error=e.description), e.code
    app.logger.error(f"Unhandled exception: {e}", exc_info=True)
    if isinstance(e, psycopg2.pool.PoolError):
        return jsonify(error="Database pool error"), 503
    if isinstance(e, psycopg2.OperationalError):
        return jsonify(error="Database connection error"), 503
    return jsonify(error="An internal server error occurred"), 500


# Import blueprints after the app, limiter and decorators exist
from .blueprints.leaderboard import leaderboard_bp  # noqa: E402
from .blueprints.lifts import lifts_bp  # noqa: E402
from .blueprints.groups import groups_bp  # noqa: E402
from .blueprints.challenges import challenges_bp  # noqa: E402

app.register_blueprint(leaderboard_bp)
app.register_blueprint(lifts_bp)
app.register_blueprint(groups_bp)
app.register_blueprint(challenges_bp)
