#!/usr/bin/env python
import sys
from pathlib import Path

from rentalcore import create_app, get_coordinator
from rentalcore.cli import load_csv
from rentalcore.importer import import_rows


def main():
    if len(sys.argv) < 2:
        print('Usage: python scripts/import_csv.py <file.csv> [<file.csv> ...]')
        sys.exit(1)
    paths = [Path(p) for p in sys.argv[1:]]
    missing = [p for p in paths if not p.exists()]
    if missing:
        print(f'File not found: {missing[0]}')
        sys.exit(2)

    app = create_app()
    with app.app_context():
        total = 0
        for p in paths:
            result = import_rows(get_coordinator(), load_csv(p))
            print(f'[{p.name}] {result.apartments} apartment(s), '
                  f'{result.tenants} tenant(s), {result.skipped} skipped')
            total += result.tenants
        print(f'Done. {total} tenant(s) imported.')

if __name__ == '__main__':
    main()
