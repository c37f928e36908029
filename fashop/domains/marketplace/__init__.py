"""
Marketplace bounded context: catalog, suppliers and the order workflow.
"""
