"""
Recreate the Taskboard schema from scratch and, unless --no-seed is given,
load the demo users (alice, bob, carol) with their projects and tasks.

    python scripts/reset_db.py
    python scripts/reset_db.py --no-seed
"""

import argparse
import sys
from pathlib import Path

BACKEND_DIR = Path(__file__).resolve().parents[1]
sys.path.insert(0, str(BACKEND_DIR))

import app.models  # noqa: F401, E402 - register tables on Base.metadata
from app.db import IS_SQLITE, Base, engine, get_db_path  # noqa: E402
from app.demo_seed import seed_demo_data  # noqa: E402


def _wipe() -> None:
    if not IS_SQLITE:
        print(f"[reset_db] Dropping tables on {engine.url.render_as_string(hide_password=True)}")
        Base.metadata.drop_all(bind=engine)
        return

    db_file = get_db_path()
    if db_file is None:
        # In-memory database: nothing persists between runs
        return
    engine.dispose()
    Path(db_file).unlink(missing_ok=True)
    print(f"[reset_db] Removed {db_file}")


def reset_database(seed: bool = True) -> None:
    _wipe()
    Base.metadata.create_all(bind=engine)
    print(f"[reset_db] Created tables: {', '.join(sorted(Base.metadata.tables))}")
    if seed:
        seed_demo_data()


def main(argv: list[str] | None = None) -> None:
    parser = argparse.ArgumentParser(description="Reset the local Taskboard database.")
    parser.add_argument("--no-seed", action="store_true", help="Leave the new database empty.")
    args = parser.parse_args(argv)
    reset_database(seed=not args.no_seed)


if __name__ == "__main__":
    main()
