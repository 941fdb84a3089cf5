"""
Route tables.

Each module builds an APIRouter from an explicit list of
(path, endpoint, methods) entries via add_api_route.
"""
