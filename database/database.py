import logging

from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import sessionmaker

from core.config_loader import DatabaseConfig

logger = logging.getLogger(__name__)


def build_engine(config: DatabaseConfig) -> Engine:
    connect_args = {}
    if config.url.startswith("sqlite"):
        # Sessions may be opened and used from different worker threads
        connect_args["check_same_thread"] = False
        return create_engine(config.url, echo=config.echo, connect_args=connect_args)

    return create_engine(
        config.url,
        echo=config.echo,
        pool_pre_ping=True,  # Verify connections before using
        pool_size=10,
        max_overflow=20
    )


def build_session_factory(engine: Engine) -> sessionmaker:
    return sessionmaker(autocommit=False, autoflush=False, bind=engine)
