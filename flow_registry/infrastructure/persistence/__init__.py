"""SQL persistence (PostgreSQL via SQLAlchemy async): engine, models, repositories."""
