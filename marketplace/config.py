# marketplace/config.py
import os
from dataclasses import dataclass, field
from typing import List

DEFAULT_DATABASE_URL = "sqlite+aiosqlite:///./database.sqlite3"


def _flag(name: str, default: str) -> bool:
    return os.getenv(name, default).strip().lower() in ("1", "true", "yes", "on")


@dataclass(frozen=True)
class Settings:
    database_url: str = DEFAULT_DATABASE_URL
    echo_sql: bool = False
    create_schema: bool = True
    seed_data: bool = False
    cors_origins: List[str] = field(default_factory=lambda: ["*"])
    port: int = 8000

    @classmethod
    def from_env(cls) -> "Settings":
        origins = os.getenv("CORS_ORIGINS", "*")
        return cls(
            database_url=os.getenv("DATABASE_URL", DEFAULT_DATABASE_URL),
            echo_sql=_flag("SQL_ECHO", "false"),
            create_schema=_flag("CREATE_SCHEMA", "true"),
            seed_data=_flag("SEED_DATA", "false"),
            cors_origins=[o.strip() for o in origins.split(",") if o.strip()],
            port=int(os.getenv("PORT", "8000")),
        )
