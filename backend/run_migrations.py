"""Apply the SQL files in migrations/ to the local SQLite database."""
from pathlib import Path
import sqlite3
import sys

BASE = Path(__file__).parent
DB_PATH = BASE / "academics.db"
MIGRATIONS = sorted((BASE / "migrations").glob("*.sql"))

def run(db_path: Path = DB_PATH):
    """Execute SQL migration files against a SQLite database.

    Every `migrations/*.sql` file is applied in lexical order. The
    scripts use `IF NOT EXISTS`, so running them twice is harmless.
    """
    print("Using database:", db_path)
    conn = sqlite3.connect(db_path)
    cur = conn.cursor()
    for m in MIGRATIONS:
        print("Applying:", m.name)
        cur.executescript(m.read_text(encoding="utf-8"))
    conn.commit()
    conn.close()
    print("Migrations applied.")

if __name__ == '__main__':
    run(Path(sys.argv[1]) if len(sys.argv) > 1 else DB_PATH)
