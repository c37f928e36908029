"""
Marketplace HTTP API
"""
