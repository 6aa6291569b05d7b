"""
Utilities Module
Constants, typed errors and shared helpers
"""
