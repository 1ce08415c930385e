"""Supabase-backed product lookup."""

from dataclasses import dataclass

from supabase import Client

from scan_relay.adapters.supabase_errors import store_errors
from scan_relay.domain.devices import Product
from scan_relay.services.host import ProductLookup


@dataclass
class SupabaseProductRepository(ProductLookup):
    """Reads products from the shared catalog table."""

    client: Client

    def get_by_id(self, product_id: str) -> Product | None:
        """Return a product by id, if present."""
        with store_errors("get_product"):
            response = (
                self.client.table("products")
                .select("id, name, stock")
                .eq("id", product_id)
                .limit(1)
                .execute()
            )
        if not response.data:
            return None
        row = response.data[0]
        stock = row.get("stock")
        return Product(
            id=str(row["id"]),
            name=str(row.get("name") or row["id"]),
            stock=int(stock) if stock is not None else None,
        )
