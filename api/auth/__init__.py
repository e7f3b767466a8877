"""
Authentication (bcrypt + JWT) and the access policy.
"""
