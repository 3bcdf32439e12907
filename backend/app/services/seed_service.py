"""
Seed Service - loads initial customers and products from a JSON file

File format:
    {
        "customers": [{"name": ..., "email": ..., "address": ...}],
        "products": [{"sku": ..., "name": ..., "currentUnitPrice": ..., "stockQuantity": ...}]
    }

A table that already has rows is left alone. Entries whose email/SKU
already exist are skipped.

Author: DSW
Date: 2025-10-17
"""
import json
import logging
from pathlib import Path
from typing import Dict, Optional, Union

from sqlalchemy.orm import Session, sessionmaker

from app.core.database import run_in_transaction
from app.domain.customer import CustomerCreate
from app.domain.product import ProductCreate
from app.models.customer import Customer
from app.models.product import Product
from app.repositories.customer_repository import CustomerRepository
from app.repositories.product_repository import ProductRepository

logger = logging.getLogger(__name__)


def load_seed_file(path: Union[str, Path]) -> Dict:
    """Read and parse a seed file"""
    seed_path = Path(path)
    if not seed_path.is_file():
        raise FileNotFoundError(f"Seed file not found: {seed_path}")
    with seed_path.open(encoding="utf-8") as f:
        return json.load(f)


def seed_database(data: Dict, session_factory: Optional[sessionmaker] = None) -> Dict[str, int]:
    """
    Insert seed customers and products in one transaction

    Returns:
        Dict with the number of customers and products created
    """
    customers = CustomerRepository()
    products = ProductRepository()

    def work(session: Session) -> Dict[str, int]:
        created = {"customers": 0, "products": 0}

        if customers.count(session) == 0:
            seen = set()
            for raw in data.get("customers", []):
                entry = CustomerCreate.model_validate(raw)
                if entry.email in seen:
                    continue
                seen.add(entry.email)
                customers.add(session, Customer(**entry.model_dump()))
                created["customers"] += 1
        else:
            logger.info("Customers table not empty, skipping customer seed")

        if products.count(session) == 0:
            seen = set()
            for raw in data.get("products", []):
                entry = ProductCreate.model_validate(raw)
                if entry.sku in seen:
                    continue
                seen.add(entry.sku)
                products.add(session, Product(**entry.model_dump()))
                created["products"] += 1
        else:
            logger.info("Products table not empty, skipping product seed")

        return created

    created = run_in_transaction(work, session_factory=session_factory)
    logger.info(f"Seeded {created['customers']} customers and {created['products']} products")
    return created


def seed_from_file(path: Union[str, Path], session_factory: Optional[sessionmaker] = None) -> Dict[str, int]:
    return seed_database(load_seed_file(path), session_factory=session_factory)
