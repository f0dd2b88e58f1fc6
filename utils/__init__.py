"""
Shared helpers: value coercion and request throttling.
"""
