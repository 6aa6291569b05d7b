"""
Record models and their JSON forms
"""
