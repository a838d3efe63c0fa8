from stockroom.api.routes import location_router, product_router, storage_object_router, storage_type_router

__all__ = ["location_router", "storage_type_router", "storage_object_router", "product_router"]
