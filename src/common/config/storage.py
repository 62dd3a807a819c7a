from dataclasses import dataclass

from common.config.env import get_env_int, get_env_str


@dataclass(frozen=True)
class StorageConfig:
    """Connection settings for the relational content store."""

    host: str
    port: int
    db_name: str
    user: str
    password: str
    schema: str = "public"
    pool_min_size: int = 1
    pool_max_size: int = 10
    command_timeout_seconds: int = 60

    @property
    def dsn(self) -> str:
        """Return an asyncpg-compatible DSN."""
        return f"postgresql://{self.user}:{self.password}@{self.host}:{self.port}/{self.db_name}"

    @classmethod
    def from_env(cls) -> "StorageConfig":
        """Load storage config from environment variables."""
        return cls(
            host=get_env_str("DB_HOST", "localhost"),
            port=get_env_int("DB_PORT", 5432),
            db_name=get_env_str("DB_NAME", "cms"),
            user=get_env_str("DB_USER", "cms"),
            password=get_env_str("DB_PASS", ""),
            schema=get_env_str("DB_SCHEMA", "public"),
            pool_min_size=get_env_int("DB_POOL_MIN_SIZE", 1),
            pool_max_size=get_env_int("DB_POOL_MAX_SIZE", 10),
            command_timeout_seconds=get_env_int("DB_COMMAND_TIMEOUT_SECS", 60),
        )
