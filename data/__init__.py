"""
Data Module
Upstream collectors, processors and record models
"""
