# app/data/seed.py
"""Dev seed: a demo user and a small catalog, only when the tables are empty."""
from decimal import Decimal

from app.data.database import SessionLocal, init_db
from app.data.models import ProductModel, UserModel, VariantModel
from app.utils.logging import get_logger

logger = get_logger(__name__)

CATALOG = [
    {
        "name": "Cotton Bedsheet",
        "description": "Double bedsheet with two pillow covers",
        "material": "Cotton",
        "variants": [
            {"color": "White", "size": "Double", "selling_price": "999.00", "market_price": "1499.00", "stock_qty": 25, "sku": "BED-WHT-D"},
            {"color": "Blue", "size": "King", "selling_price": "1299.00", "market_price": "1899.00", "stock_qty": 10, "sku": "BED-BLU-K"},
        ],
    },
    {
        "name": "Bath Towel",
        "description": "Quick-dry bath towel",
        "material": "Bamboo",
        "variants": [
            {"color": "Grey", "size": "Large", "selling_price": "449.00", "market_price": "699.00", "stock_qty": 40, "sku": "TWL-GRY-L"},
        ],
    },
]


def seed():
    init_db()
    db = SessionLocal()
    try:
        # not forcing: only seed if empty
        if db.query(ProductModel).first():
            logger.info("Catalog already seeded")
            return

        db.add(
            UserModel(
                name="Demo User",
                email="demo@example.com",
                phone_number="9999999999",
                street="1 Market Street",
                city="Pune",
                postal_code="411001",
            )
        )
        for entry in CATALOG:
            product = ProductModel(
                name=entry["name"],
                description=entry["description"],
                material=entry["material"],
            )
            for v in entry["variants"]:
                product.variants.append(
                    VariantModel(
                        color=v["color"],
                        size=v["size"],
                        selling_price=Decimal(v["selling_price"]),
                        market_price=Decimal(v["market_price"]),
                        stock_qty=v["stock_qty"],
                        sku=v["sku"],
                    )
                )
            db.add(product)
        db.commit()
        logger.info(f"Seeded {len(CATALOG)} products")
    finally:
        db.close()


if __name__ == "__main__":
    seed()
