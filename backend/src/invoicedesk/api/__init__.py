"""
API package - FastAPI routes, dependencies and response schemas.
"""
