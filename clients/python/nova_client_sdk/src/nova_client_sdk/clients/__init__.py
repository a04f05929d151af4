from .audit import AuditClient
from .auth import AuthClient
from .inventory import InventoryClient
from .products import ProductsClient

__all__ = ["AuditClient", "AuthClient", "InventoryClient", "ProductsClient"]
