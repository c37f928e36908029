"""
HTTP layer: router aggregation, exception handlers and middleware.
"""
