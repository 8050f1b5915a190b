import psycopg2
import sys

from strength_rank.db import get_db_connection_params

conn_params = get_db_connection_params()


# SQL commands to create tables, indexes and the current_prs view
SQL_COMMANDS = """
-- Lift Entries Table (immutable log of attempts)
CREATE TABLE IF NOT EXISTS lift_entries (
    id UUID PRIMARY KEY,
    user_id TEXT NOT NULL,
    user_name TEXT NOT NULL,
    exercise TEXT NOT NULL CHECK (exercise IN ('bench_press', 'back_squat', 'deadlift', 'overhead_press', 'chin_up')),
    reps INTEGER NOT NULL CHECK (reps >= 1),
    weight_kg DECIMAL(7,2) NOT NULL CHECK (weight_kg > 0),
    performed_at TIMESTAMP WITH TIME ZONE NOT NULL,
    gym_id TEXT,
    gender TEXT CHECK (gender IN ('male', 'female', 'other')),
    age INTEGER,
    equipment TEXT,
    verification TEXT NOT NULL DEFAULT 'unverified'
        CHECK (verification IN ('unverified', 'pending', 'verified', 'rejected')),
    created_at TIMESTAMP WITH TIME ZONE NOT NULL DEFAULT CURRENT_TIMESTAMP
);

-- Groups Table (roster is replaced wholesale on save)
CREATE TABLE IF NOT EXISTS lift_groups (
    name TEXT PRIMARY KEY,
    updated_at TIMESTAMP WITH TIME ZONE DEFAULT CURRENT_TIMESTAMP
);

CREATE TABLE IF NOT EXISTS group_members (
    group_name TEXT NOT NULL REFERENCES lift_groups(name) ON DELETE CASCADE,
    position INTEGER NOT NULL,
    member_name TEXT NOT NULL,
    PRIMARY KEY (group_name, position),
    UNIQUE (group_name, member_name)
);

CREATE INDEX IF NOT EXISTS idx_lift_entries_exercise ON lift_entries(exercise);
CREATE INDEX IF NOT EXISTS idx_lift_entries_user_performed_at ON lift_entries(user_id, performed_at DESC);
CREATE INDEX IF NOT EXISTS idx_lift_entries_created_at ON lift_entries(created_at, id);

-- Current PR per user and lift: highest Epley score, earliest entry wins ties
CREATE MATERIALIZED VIEW IF NOT EXISTS current_prs AS
SELECT DISTINCT ON (user_id, exercise)
    user_id,
    exercise,
    id AS lift_entry_id,
    user_name,
    weight_kg,
    reps,
    FLOOR(weight_kg * (1 + reps / 30.0) + 0.5)::INTEGER AS score,
    performed_at,
    verification
FROM lift_entries
ORDER BY user_id, exercise, FLOOR(weight_kg * (1 + reps / 30.0) + 0.5) DESC, created_at ASC, id ASC;

-- Required for REFRESH MATERIALIZED VIEW CONCURRENTLY
CREATE UNIQUE INDEX IF NOT EXISTS idx_current_prs_user_exercise ON current_prs(user_id, exercise);
"""

def create_schema():
    conn = None
    try:
        print(f"Attempting to connect to host '{conn_params.get('host')}'.")
        conn = psycopg2.connect(**conn_params)
        print(f"Successfully connected to database '{conn_params.get('dbname')}' on host '{conn_params.get('host')}'.")
        with conn.cursor() as cur:
            cur.execute(SQL_COMMANDS)
            print("Schema creation commands executed.")
        conn.commit()
        print("Schema created successfully (or already existed).")
    except psycopg2.OperationalError as e:
        print(f"Error connecting to the database: {e}")
        print("Please ensure PostgreSQL is running and accessible, "
              "and that the target database exists with appropriate permissions.")
        sys.exit(1)
    except psycopg2.Error as e:
        print(f"Error during database operation: {e}")
        if conn:
            conn.rollback()
        sys.exit(1)
    finally:
        if conn:
            conn.close()
            print("Database connection closed.")

if __name__ == "__main__":
    print("Attempting to create/update database schema...")
    create_schema()
    print("Script finished.")
