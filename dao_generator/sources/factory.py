"""
Builds a schema source from connection settings.
"""

import os
from dataclasses import dataclass
from typing import Optional

from sqlalchemy import create_engine
from sqlalchemy.engine import URL

from .base import SchemaSource
from .mysql import MySqlSchemaSource
from .postgresql import PostgresSchemaSource

PASSWORD_ENV_VAR = "DAO_GENERATOR_PASSWORD"

DRIVERS = {
    "mysql": ("mysql+pymysql", 3306),
    "mariadb": ("mysql+pymysql", 3306),
    "postgresql": ("postgresql+psycopg2", 5432),
}


@dataclass
class ConnectionSettings:
    """Where and how to reach the database server."""

    driver: str = "mysql"
    host: str = "localhost"
    port: Optional[int] = None
    user: Optional[str] = None
    password: Optional[str] = None
    database: Optional[str] = None

    def __post_init__(self):
        self.driver = self.driver.lower()
        if self.driver not in DRIVERS:
            raise ValueError(
                f"Unsupported driver: {self.driver}. "
                f"Available: {', '.join(sorted(DRIVERS))}"
            )
        if self.port is None:
            self.port = DRIVERS[self.driver][1]
        if self.password is None:
            self.password = os.environ.get(PASSWORD_ENV_VAR)

    def url(self) -> URL:
        return URL.create(
            DRIVERS[self.driver][0],
            username=self.user,
            password=self.password,
            host=self.host,
            port=self.port,
            database=self.database,
        )


def create_schema_source(settings: ConnectionSettings, **engine_options) -> SchemaSource:
    """Create the schema source matching ``settings.driver``."""
    engine = create_engine(settings.url(), pool_pre_ping=True, **engine_options)

    if settings.driver == "postgresql":
        return PostgresSchemaSource(engine)
    return MySqlSchemaSource(engine)
