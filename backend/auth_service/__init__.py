"""
Auth service: login, registration, token refresh and logout
"""
