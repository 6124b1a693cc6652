"""
models/ - Domain Layer
======================
Plain dataclasses for the entities the rest of the app passes around.
No database or HTTP knowledge lives here.
"""
