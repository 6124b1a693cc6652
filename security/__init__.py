"""
security/ - Security Layer
==========================
Password hashing, session tokens, the authenticated-user dependency
and request rate limiting.
"""
