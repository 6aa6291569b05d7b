"""
Data Processors
Normalization, validation, coin aggregation and news ranking
"""
