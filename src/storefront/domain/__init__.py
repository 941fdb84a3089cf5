"""
Domain schemas.
"""
