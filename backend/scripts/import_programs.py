"""CLI script to import a JSON catalogue of programs into the backend DB.
Usage: python scripts/import_programs.py catalogue.json [--dry-run]
"""
import sys
import argparse
import pathlib
# Ensure `backend/` is on sys.path so `academics` imports work when running this script directly
ROOT = pathlib.Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))
from sqlmodel import Session
from academics.courses import CourseContext
from academics.database import create_db_and_tables, engine
from academics.importer import import_programs, load_catalogue

def main(path: pathlib.Path, dry_run: bool = False):
    """Load `path` and create its programs and semesters.

    Results are printed to stdout for a quick CLI feedback loop.
    """
    if not path.exists():
        print(f'Catalogue not found at {path}')
        return 1
    items = load_catalogue(path.read_bytes())
    create_db_and_tables()
    with Session(engine) as session:
        result = import_programs(CourseContext(session), items, dry_run=dry_run)
    for err in result['errors']:
        print(f"Item {err['index']}: {err['errors']}")
    print(f"Created programs: {result['created_programs']}, semesters: {result['created_semesters']}, "
          f"skipped {result['skipped']}, errors {len(result['errors'])}")
    return 0

if __name__ == '__main__':
    parser = argparse.ArgumentParser()
    parser.add_argument('catalogue', type=pathlib.Path, help='JSON list of programs')
    parser.add_argument('--dry-run', action='store_true', help='Validate without writing')
    args = parser.parse_args()
    sys.exit(main(args.catalogue, dry_run=args.dry_run))
