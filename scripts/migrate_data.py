#!/usr/bin/env python3
"""
Import ponctuel du tableur Brands_List.xlsx (feuille "Brands") dans la base du CRM.
À exécuter depuis la racine du projet : `python3 scripts/migrate_data.py --file Brands_List.xlsx`.
La base cible est celle de DATABASE_URL (SQLite local par défaut).
"""
from pathlib import Path
from typing import List, Optional
import argparse
import logging
import sys

# Ajouter la racine du projet au PYTHONPATH si besoin
ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from accent_crm.database import SessionLocal, init_db
from accent_crm.services.importer import import_rows, read_rows


def main(argv: Optional[List[str]] = None) -> int:
    parser = argparse.ArgumentParser(description="Migre le tableur des marques vers la base du CRM.")
    parser.add_argument("--file", type=Path, default=Path("Brands_List.xlsx"), help="Classeur Excel source")
    args = parser.parse_args(argv)

    logging.basicConfig(level=logging.INFO, format="%(levelname)s %(message)s")

    if not args.file.exists():
        print(f"Fichier introuvable : {args.file}")
        return 1

    init_db()
    rows = read_rows(str(args.file))
    print(f"Found {len(rows)} brands to import")

    db = SessionLocal()
    try:
        report = import_rows(db, rows)
    finally:
        db.close()

    print("=== Migration Summary ===")
    print(f"Imported: {report.imported}")
    print(f"Skipped: {report.skipped}")
    print(f"Errors: {report.errors}")
    for message in report.messages:
        print(f"  - {message}")
    return 0 if not report.errors else 2


if __name__ == "__main__":
    raise SystemExit(main())
