# Routes package init
"""
Catalog Backend — API Routes Package
======================================

Route Inventory:
    - products.py:  POST   /products                 (create)
                    GET    /products                 (paginated list)
                    GET    /products/{term}          (by id, slug or title)
                    PATCH  /products/{id}            (partial update)
                    DELETE /products/{id}            (remove)
    - files.py:     POST   /files/product            (JPEG upload)
                    GET    /files/product/{path}     (serve upload)
    - admin.py:     DELETE /admin/products           (delete all, token-gated)
    - health.py:    GET    /health                   (service health)
"""
