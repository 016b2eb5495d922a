"""Database Metadata — SQLAlchemy Base shared by models, alembic and tests."""
