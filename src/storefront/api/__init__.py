"""
HTTP layer: FastAPI application, route tables and middleware.
"""
