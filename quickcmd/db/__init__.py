"""Command store: SQLAlchemy models, engine setup and the CommandStore."""
