"""
Infrastructure package - Database engine, tables and the persistence gateway.
"""
