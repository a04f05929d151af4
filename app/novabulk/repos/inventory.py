from sqlalchemy import select

from app.novabulk.db.models import Inventory, Product


class InventoryRepository:
    def __init__(self, db):
        self.db = db

    def get(self, *, product_id, location_id: str):
        stmt = select(Inventory).where(Inventory.product_id == product_id, Inventory.location_id == location_id)
        return self.db.execute(stmt).scalars().first()

    def list_with_products(self, *, location_id: str | None = None, product_id=None, limit: int = 100):
        stmt = select(Inventory, Product).join(Product, Product.product_id == Inventory.product_id)
        if location_id:
            stmt = stmt.where(Inventory.location_id == location_id)
        if product_id:
            stmt = stmt.where(Inventory.product_id == product_id)
        stmt = stmt.order_by(Inventory.location_id, Product.product_name).limit(limit)
        return self.db.execute(stmt).all()

    def get_with_product(self, *, location_id: str, product_id):
        stmt = (
            select(Inventory, Product)
            .join(Product, Product.product_id == Inventory.product_id)
            .where(Inventory.location_id == location_id, Inventory.product_id == product_id)
        )
        return self.db.execute(stmt).first()

    def add(self, item: Inventory) -> Inventory:
        self.db.add(item)
        self.db.flush()
        return item

    def delete(self, item: Inventory) -> None:
        self.db.delete(item)
        self.db.flush()
