"""
handlers/ - Presentation Layer
================================
FastAPI routers. Each handler parses the request, delegates to the
appropriate Service, and shapes the JSON response.
No business logic lives here.
"""
