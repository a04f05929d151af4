from sqlalchemy import select

from app.novabulk.db.models import Inventory, Product


class ProductRepository:
    def __init__(self, db):
        self.db = db

    def get_by_id(self, product_id):
        return self.db.get(Product, product_id)

    def get_by_sku(self, sku: str):
        stmt = select(Product).where(Product.sku == sku).order_by(Product.product_name)
        return self.db.execute(stmt).scalars().first()

    def list(self, *, sku: str | None = None, product_id=None, limit: int = 100):
        stmt = select(Product)
        if sku:
            stmt = stmt.where(Product.sku == sku)
        if product_id:
            stmt = stmt.where(Product.product_id == product_id)
        stmt = stmt.order_by(Product.product_name).limit(limit)
        return self.db.execute(stmt).scalars().all()

    def add(self, product: Product) -> Product:
        self.db.add(product)
        self.db.flush()
        return product

    def delete(self, product: Product) -> None:
        self.db.delete(product)
        self.db.flush()

    def has_inventory(self, product_id) -> bool:
        stmt = select(Inventory.inventory_id).where(Inventory.product_id == product_id).limit(1)
        return self.db.execute(stmt).first() is not None
