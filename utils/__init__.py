"""
utils/ - Shared Helpers
=======================
Logging, date arithmetic and error types used by every layer.
"""
