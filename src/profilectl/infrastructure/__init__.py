"""Infrastructure layer — SQLite persistence via SQLAlchemy Core.

This layer may import domain models but never services, commands, or output.
The service layer bridges between domain rules and the store.
"""
