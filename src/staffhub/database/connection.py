from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from pymongo import MongoClient
from pymongo.database import Database


@dataclass
class DBConfig:
    uri: str
    database: str


class DatabaseConnection:
    """Singleton-like MongoDB client holder.

    Note: MongoClient owns its own connection pool and is safe to share across
    requests; only the client is cached, sessions are created per operation.
    """

    _instance: Optional["DatabaseConnection"] = None

    def __init__(self, config: DBConfig, client: Optional[MongoClient] = None):
        self._config = config
        self._client = client

    @classmethod
    def get_instance(cls, config: DBConfig) -> "DatabaseConnection":
        if cls._instance is None:
            cls._instance = DatabaseConnection(config)
        return cls._instance

    @property
    def client(self) -> MongoClient:
        if self._client is None:
            self._client = MongoClient(self._config.uri, tz_aware=False)
        return self._client

    @property
    def db(self) -> Database:
        return self.client[self._config.database]

    def close(self) -> None:
        if self._client is not None:
            self._client.close()
            self._client = None
