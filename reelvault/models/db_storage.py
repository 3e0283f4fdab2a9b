from sqlalchemy import create_engine, event
from sqlalchemy.orm import scoped_session, sessionmaker
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm.exc import ObjectDeletedError
from sqlalchemy.pool import StaticPool

from reelvault.models.base_model import Base
from reelvault.models.user import User
from reelvault.models.refresh_token import RefreshToken

# Map model names for easy lookups
classes = {
    "User": User,
    "RefreshToken": RefreshToken,
}


class DBStorage:
    """
    Thin wrapper over an engine and a thread-local scoped_session.
    The app factory calls configure() then reload(); each request thread gets
    its own session, removed again by close() at app-context teardown.
    """
    __engine = None
    __session = None

    def configure(self, database_url: str, echo: bool = False):
        """(Re)build the engine for database_url."""
        if self.__session is not None:
            self.__session.remove()
        if self.__engine is not None:
            self.__engine.dispose()

        kwargs = {"echo": echo}
        if database_url.startswith("sqlite"):
            # Sessions hop threads through the pool; wait on the write lock instead of failing
            kwargs["connect_args"] = {"check_same_thread": False, "timeout": 15}
            if database_url in ("sqlite://", "sqlite:///:memory:"):
                kwargs["poolclass"] = StaticPool
        else:
            kwargs["pool_pre_ping"] = True
        self.__engine = create_engine(database_url, **kwargs)

        if self.__engine.url.get_backend_name() == "sqlite":
            # Enable SQLite foreign keys (needed for ON DELETE CASCADE)
            @event.listens_for(self.__engine, "connect")
            def _set_sqlite_pragma(dbapi_connection, connection_record):
                cursor = dbapi_connection.cursor()
                cursor.execute("PRAGMA foreign_keys=ON")
                cursor.close()

    def reload(self):
        """Create tables and start session"""
        Base.metadata.create_all(self.__engine)
        session_factory = sessionmaker(bind=self.__engine, expire_on_commit=False)
        self.__session = scoped_session(session_factory)

    def new(self, obj):
        """Add object to session"""
        self.__session.add(obj)

    def flush(self):
        """Emit pending INSERT/UPDATEs inside the current transaction"""
        self.__session.flush()

    def save(self):
        """Commit session"""
        try:
            self.__session.commit()
        except SQLAlchemyError:
            self.__session.rollback()
            raise

    def rollback(self):
        self.__session.rollback()

    def get(self, cls, id):
        """Fetch one object by class and ID; None if the row is gone"""
        if cls not in classes.values():
            return None
        try:
            return self.__session.get(cls, id)
        except ObjectDeletedError:
            # Expired instance whose row was deleted outside the ORM (bulk delete, FK cascade)
            return None

    def close(self):
        """Remove session (for API teardown)"""
        if self.__session is not None:
            self.__session.remove()

    # expose the SQLAlchemy session for advanced querying (filters, bulk statements)
    def get_session(self):
        return self.__session
