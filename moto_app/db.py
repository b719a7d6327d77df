from datetime import datetime, timezone

from sqlalchemy import create_engine, Column, DateTime, Integer, String
from sqlalchemy.orm import sessionmaker, declarative_base
from sqlalchemy.pool import StaticPool

from .config import settings
from .entity import Motorcycle, MAX_MAKE_LENGTH, MAX_MODEL_LENGTH, VIN_LENGTH

SQLALCHEMY_DATABASE_URI = settings.database_url

# parent class for the ORM models
Base = declarative_base()


class MotorcycleRecord(Base):
    __tablename__ = "motorcycles"
    # AUTOINCREMENT stops SQLite from handing out the id of a deleted row again
    __table_args__ = {"sqlite_autoincrement": True}

    id = Column(Integer, primary_key=True)
    make = Column(String(MAX_MAKE_LENGTH), nullable=False)
    model = Column(String(MAX_MODEL_LENGTH), nullable=False)
    year = Column(Integer, nullable=False)
    vin = Column(String(VIN_LENGTH), unique=True, index=True, nullable=False)
    created_utc = Column(DateTime(timezone=True), nullable=False)
    modified_utc = Column(DateTime(timezone=True))

    def to_entity(self) -> Motorcycle:
        return Motorcycle(
            id=self.id,
            make=self.make,
            model=self.model,
            year=self.year,
            vin=self.vin,
            created_utc=as_utc(self.created_utc),
            modified_utc=as_utc(self.modified_utc),
        )


def as_utc(value: datetime | None) -> datetime | None:
    # SQLite hands datetimes back without tzinfo
    if value is not None and value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


def create_session_factory(uri: str = SQLALCHEMY_DATABASE_URI) -> sessionmaker:
    """
    Create an engine for ``uri``, make sure the tables exist and return a session factory.

    Args:
        uri (str): SQLAlchemy database URL.

    Returns:
        sessionmaker: Factory producing sessions bound to the new engine.
    """
    engine_options = {}
    if uri.startswith("sqlite"):
        # In FastAPI, more than one thread can interact with the database for the same request
        engine_options["connect_args"] = {"check_same_thread": False}
        if uri in ("sqlite://", "sqlite:///:memory:"):
            # an in-memory database lives only as long as its single connection
            engine_options["poolclass"] = StaticPool
    engine = create_engine(uri, **engine_options)

    Base.metadata.create_all(bind=engine)

    # each instance of the returned class becomes a db session
    return sessionmaker(autoflush=False, bind=engine)
