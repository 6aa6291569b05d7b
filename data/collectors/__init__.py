"""
Data Collectors
Market rows, influencer posts and synthesized social signals
"""
