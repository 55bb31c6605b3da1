"""
Demo data
- clears all business data (table structure is kept)
- creates two companies with products and customer accounts

Orders are left to the API so every stock and credit change goes through
the order workflow.
"""

import asyncio
import os
import sys
from decimal import Decimal

sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncSession

from bizhub.db.init_db import ensure_tables_exist
from bizhub.db.session import SessionLocal
from bizhub.models import Account, Company, Product

TABLES_TO_CLEAR = [
    "sales_journal_entries",
    "order_flows",
    "order_items",
    "orders",
    "accounts",
    "products",
    "companies",
]

DEMO_COMPANIES = [
    {
        "name": "Gulf Trading Co.",
        "email": "info@gulftrading.example",
        "payment_terms": "credit_30",
        "products": [
            ("Mineral Water 1.5L", "WAT-150", "AquaPure", "Beverages", "0.35", 10, 500),
            ("Orange Juice 1L", "JUI-100", "Sunny", "Beverages", "1.20", 10, 120),
            ("Basmati Rice 5kg", "RIC-005", "Royal", "Groceries", "4.50", 0, 60),
        ],
        "accounts": [
            ("Corner Cafe", "cafe@example.com", "500.00"),
            ("City Hotel", "purchasing@cityhotel.example", "2000.00"),
        ],
    },
    {
        "name": "Pearl Supplies",
        "email": "sales@pearlsupplies.example",
        "payment_terms": "cash",
        "products": [
            ("A4 Paper Ream", "PAP-A4", "OfficeOne", "Stationery", "3.00", 10, 200),
            ("Printer Toner", "TON-01", "PrintMax", "Stationery", "25.00", 10, 15),
        ],
        "accounts": [
            ("Northside School", "admin@northside.example", "1500.00"),
        ],
    },
]


async def clear_all_data(db: AsyncSession):
    print("🗑️  Clearing data...")
    for table in TABLES_TO_CLEAR:
        await db.execute(text(f"DELETE FROM {table}"))
        print(f"   ✓ {table}")
    await db.commit()


async def create_company(db: AsyncSession, company_data: dict) -> Company:
    company = Company(name=company_data["name"], email=company_data["email"], payment_terms=company_data["payment_terms"])
    db.add(company)
    await db.flush()

    for name, sku, brand, category, price, vat_rate, stock in company_data["products"]:
        db.add(Product(
            company_id=company.id,
            name=name,
            sku=sku,
            brand=brand,
            category=category,
            price=Decimal(price),
            cost=(Decimal(price) * Decimal("0.7")).quantize(Decimal("0.01")),
            vat_rate=Decimal(vat_rate),
            stock_current=stock,
        ))

    for name, email, credit_limit in company_data["accounts"]:
        db.add(Account(company_id=company.id, name=name, email=email, credit_limit=Decimal(credit_limit)))

    await db.flush()
    print(f"🏢 {company.name} (id={company.id}): "
          f"{len(company_data['products'])} products, {len(company_data['accounts'])} accounts")
    return company


async def main():
    await ensure_tables_exist()
    async with SessionLocal() as db:
        await clear_all_data(db)
        for company_data in DEMO_COMPANIES:
            await create_company(db, company_data)
        await db.commit()
    print("\n✅ Demo data ready")


if __name__ == "__main__":
    asyncio.run(main())
