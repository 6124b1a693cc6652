"""
services/ - Business Logic Layer
================================
Validation, the recurring execution engine, analytics and budget usage.
Services talk to repositories only; they know nothing about HTTP.
"""
