"""
Marketplace Domain - Infrastructure Layer

SQLAlchemy repositories and the SMS notification gateway.
"""
