"""
MySQL connection settings.

Settings are read from the environment by ``DatabaseConfig.from_env`` and
passed to ``mysql.connector.connect`` via ``as_connect_kwargs``.
"""

import os
from typing import Any, Dict, Optional

from pydantic import BaseModel, Field


class DatabaseConfig(BaseModel):
    """Connection settings for the MySQL server holding the source tables."""

    host: str = Field("localhost", description="MySQL server host")
    port: int = Field(3306, ge=1, le=65535, description="MySQL server port")
    user: str = Field("root", description="Database user")
    password: Optional[str] = Field(None, description="Database password")
    database: Optional[str] = Field(None, description="Default schema for the session")
    charset: str = Field("utf8mb4", description="Connection character set")

    @classmethod
    def from_env(cls) -> "DatabaseConfig":
        """Build settings from DB_HOST, DB_PORT, DB_USER, DB_PASSWORD and DB_NAME."""
        return cls(
            host=os.getenv('DB_HOST', 'localhost'),
            port=os.getenv('DB_PORT', '3306'),
            user=os.getenv('DB_USER', 'root'),
            password=os.getenv('DB_PASSWORD'),
            database=os.getenv('DB_NAME'),
            charset=os.getenv('DB_CHARSET', 'utf8mb4')
        )

    def as_connect_kwargs(self) -> Dict[str, Any]:
        """Keyword arguments for mysql.connector.connect, unset values omitted."""
        return self.model_dump(exclude_none=True)
