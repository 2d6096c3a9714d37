"""
Shared library for the API gateway and backend services
"""
