"""
Monitoring Module
Structured logging setup
"""
