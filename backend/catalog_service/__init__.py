"""
Catalog service: products
"""
