"""
Configuration Module
Settings, schema-validated engine configuration and upstream rate limiting
"""
