from authcore.db.base import Base, create_db_engine, create_session_factory

__all__ = ["Base", "create_db_engine", "create_session_factory"]
