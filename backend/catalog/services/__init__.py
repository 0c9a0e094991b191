# Services package init
"""
Catalog Backend — Services Layer
==================================

Service Inventory:
    - lookup:          classify a search term (ById / ByText) and resolve it
    - ProductService:  product CRUD and the transactional image replacement
    - FileService:     product image upload validation and storage
"""
