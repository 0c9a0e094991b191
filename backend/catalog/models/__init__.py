# Importing both models registers them on Base.metadata and lets the
# string-based relationship() targets resolve.
from catalog.models.product import Product
from catalog.models.product_image import ProductImage

__all__ = ["Product", "ProductImage"]
