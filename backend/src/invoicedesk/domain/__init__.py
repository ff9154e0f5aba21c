"""
Domain package - Core business types with no external dependencies.

This package contains the plain dataclasses and error types shared by
the validator, the persistence gateway and the action handlers.
"""
