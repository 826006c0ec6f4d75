"""Configuration management for sbomdiff."""
import os
from dataclasses import dataclass
from dataclasses import field
from typing import Literal

MatchKey = Literal['name', 'name_purl_type']
MATCH_KEYS: tuple[str, ...] = ('name', 'name_purl_type')


@dataclass
class DatabaseConfig:
    """Database connection configuration."""
    host: str = field(
        default_factory=lambda: os.getenv(
            'CLICKHOUSE_HOST', 'localhost',
        ),
    )
    port: int = field(
        default_factory=lambda: int(
            os.getenv('CLICKHOUSE_PORT', '8123'),
        ),
    )
    user: str = 'guest'
    password: str = 'guest'
    database: str = field(
        default_factory=lambda: os.getenv(
            'CLICKHOUSE_DB', 'sbomdiff',
        ),
    )

    # Table names
    sboms_table: str = 'sboms'
    components_table: str = 'components'
    vulnerabilities_table: str = 'component_vulnerabilities'

    def __repr__(self) -> str:
        return (
            f"DatabaseConfig(host={self.host!r}, port={self.port!r}, "
            f"user={self.user!r}, password='*****', database={self.database!r}, "
            f"sboms_table={self.sboms_table!r}, components_table={self.components_table!r}, "
            f"vulnerabilities_table={self.vulnerabilities_table!r})"
        )

    @property
    def tables(self) -> tuple[str, str, str]:
        return (self.sboms_table, self.components_table, self.vulnerabilities_table)

    def get_connection_params(self) -> dict:
        return {
            'host': self.host,
            'port': self.port,
            'username': self.user,
            'password': self.password,
            'database': self.database,
        }


@dataclass
class ServerConfig:
    """HTTP API bind configuration."""
    host: str = field(
        default_factory=lambda: os.getenv('SBOMDIFF_HOST', '127.0.0.1'),
    )
    port: int = field(
        default_factory=lambda: int(os.getenv('SBOMDIFF_PORT', '8080')),
    )


@dataclass
class DiffConfig:
    """Component identity settings for the diff engine."""
    match_key: str = field(
        default_factory=lambda: os.getenv('SBOMDIFF_MATCH_KEY', 'name'),
    )

    def __post_init__(self) -> None:
        if self.match_key not in MATCH_KEYS:
            raise ValueError(
                f"Unsupported match key {self.match_key!r}, expected one of {', '.join(MATCH_KEYS)}",
            )


@dataclass
class SbomDiffConfig:
    server: ServerConfig = field(default_factory=ServerConfig)
    diff: DiffConfig = field(default_factory=DiffConfig)

    # Base DB config (defaults to env vars)
    _db_base: DatabaseConfig = field(default_factory=DatabaseConfig)

    def get_db_config(self, role: Literal['admin', 'guest'] = 'guest') -> DatabaseConfig:
        """Get database configuration for a specific role."""
        config = DatabaseConfig(
            host=self._db_base.host,
            port=self._db_base.port,
            database=self._db_base.database,
        )
        if role == 'admin':
            config.user = os.getenv('CLICKHOUSE_ADMIN_USER', 'admin')
            config.password = os.getenv('CLICKHOUSE_ADMIN_PASSWORD', 'admin')
        else:
            config.user = os.getenv('CLICKHOUSE_GUEST_USER', 'guest')
            config.password = os.getenv('CLICKHOUSE_GUEST_PASSWORD', 'guest')
        return config

    @classmethod
    def load(cls) -> 'SbomDiffConfig':
        return cls()


_config: SbomDiffConfig | None = None


def get_config() -> SbomDiffConfig:
    global _config
    if _config is None:
        _config = SbomDiffConfig.load()
    return _config
