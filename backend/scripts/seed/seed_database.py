"""
Seed customers and products from a JSON file

Creates missing tables, then loads the file. Tables that already have
rows are left untouched.

Usage:
    python3 seed_database.py path/to/seed.json

Author: DSW
Date: 2025-10-17
"""
import argparse
import logging
import os
import sys

# Add parent directory to path for imports
sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '../..')))

from app.core.database import init_db
from app.services.seed_service import seed_from_file


def main():
    parser = argparse.ArgumentParser(description="Seed customers and products")
    parser.add_argument("seed_file", help="JSON file with 'customers' and 'products' lists")
    args = parser.parse_args()

    logging.basicConfig(level=logging.INFO, format="%(levelname)s %(message)s")

    init_db()
    created = seed_from_file(args.seed_file)
    print(f"✅ Created {created['customers']} customers and {created['products']} products")


if __name__ == "__main__":
    main()
