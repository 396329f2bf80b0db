# services/__init__.py
"""
Business logic, kept out of the routers.

Modules are imported directly (services.payment_service,
services.mpesa_service, ...) so that importing one service does not pull in
every integration.
"""
