"""
Shared, cross-cutting code.

`core/` holds the small building blocks both sides use: settings, logging
setup, and the document database wiring for the status service. The HTTP
client facade lives in `client/`, the status routes in `status/`.
"""
