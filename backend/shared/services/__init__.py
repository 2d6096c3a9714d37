"""
Shared services module

Use direct imports, e.g. ``from shared.services.service_factory import create_fastapi_service``.
"""
