from sqlalchemy import select

from app.novabulk.db.models import InventoryTransaction, Product


class TransactionRepository:
    def __init__(self, db):
        self.db = db

    def add(self, transaction: InventoryTransaction) -> InventoryTransaction:
        self.db.add(transaction)
        self.db.flush()
        return transaction

    def list_with_products(self, *, product_id=None, limit: int = 50):
        stmt = select(InventoryTransaction, Product).outerjoin(
            Product, Product.product_id == InventoryTransaction.product_id
        )
        if product_id:
            stmt = stmt.where(InventoryTransaction.product_id == product_id)
        stmt = stmt.order_by(InventoryTransaction.timestamp.desc(), InventoryTransaction.transaction_id.desc())
        return self.db.execute(stmt.limit(limit)).all()
