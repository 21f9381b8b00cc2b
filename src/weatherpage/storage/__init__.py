from .db import initialize_database, open_db, record_page_view, run_migrations

__all__ = [
    "initialize_database",
    "open_db",
    "record_page_view",
    "run_migrations",
]
