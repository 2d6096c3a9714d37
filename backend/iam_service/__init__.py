"""
IAM service: users, roles and permissions
"""
