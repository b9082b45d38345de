from authcore.db.models.user import User

__all__ = ["User"]
