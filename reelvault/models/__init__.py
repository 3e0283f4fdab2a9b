"""Persistence layer: the process-wide DBStorage singleton."""
from reelvault.models.db_storage import DBStorage

storage = DBStorage()
