"""
Rewrites a listings CSV (e.g. a database export) into the column layout
the chat service loads: make, model, price, dealer.city, moderation flags...

usage: python scripts/normalize_catalog.py [path/to/catalog.csv]
"""
import os
import sys

from cardb.config import CATALOG_PATH
from cardb.reco.catalog import COLUMN_SYNONYMS, load_catalog


def main(path: str) -> None:
    df = load_catalog(path)
    cols = [c for c in COLUMN_SYNONYMS if c in df.columns]
    df[cols].to_csv(path, index=False)

    print("catalog normalized:", os.path.abspath(path))
    print("columns:", cols)
    print("rows:", len(df))


if __name__ == "__main__":
    main(sys.argv[1] if len(sys.argv) > 1 else CATALOG_PATH)
