"""Data access layer. Reads are separated from schema management:
SnapshotRepository runs as the read-only guest, IngestionRepository as admin."""
from abc import ABC
from abc import abstractmethod
from collections.abc import Generator
from uuid import UUID

import clickhouse_connect
from clickhouse_connect.driver.client import Client

from sbomdiff.core.config import DatabaseConfig
from sbomdiff.core.schema import ALL_DDL
from sbomdiff.models.sbom import Component
from sbomdiff.models.sbom import SbomSnapshot
from sbomdiff.models.sbom import VulnerabilityAssociation


class SnapshotProvider(ABC):
    """Source of already-parsed snapshot data consumed by the diff service."""

    @abstractmethod
    def get_snapshot(self, snapshot_id: UUID) -> SbomSnapshot | None:
        ...

    @abstractmethod
    def get_components(self, snapshot_id: UUID) -> list[Component]:
        ...

    @abstractmethod
    def get_vulnerability_associations(self, snapshot_id: UUID) -> list[VulnerabilityAssociation]:
        ...


class BaseRepository(ABC):
    """Abstract base repository handling connection lifecycle."""

    def __init__(self, config: DatabaseConfig):
        self.config = config
        self._client: Client | None = None

    @property
    def client(self) -> Client:
        if self._client is None:
            self._client = clickhouse_connect.get_client(
                **self.config.get_connection_params(),
            )
        return self._client

    def close(self) -> None:
        if self._client is not None:
            self._client.close()
            self._client = None

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()


class IngestionRepository(BaseRepository):
    """Admin repository for schema management."""

    def ensure_schema(self) -> None:
        """Idempotent schema creation."""
        self.client.command(
            f"CREATE DATABASE IF NOT EXISTS {self.config.database}",
        )
        for ddl in ALL_DDL:
            self.client.command(ddl)

    def reset_schema(self) -> None:
        """Drop and recreate schema (Destructive)."""
        for table in reversed(self.config.tables):
            self.client.command(f'DROP TABLE IF EXISTS {table}')
        self.ensure_schema()


class SnapshotRepository(BaseRepository, SnapshotProvider):
    """Read-only repository serving snapshots, components and CVE links."""

    def get_snapshot(self, snapshot_id: UUID) -> SbomSnapshot | None:
        query = f"""
        SELECT id, project_id, format, format_version, created_at
        FROM {self.config.sboms_table} FINAL
        WHERE id = {{sbom_id:UUID}}
        LIMIT 1
        """
        rows = self.client.query(query, parameters={'sbom_id': str(snapshot_id)}).result_rows
        if not rows:
            return None
        sbom_id, project_id, fmt, fmt_version, created_at = rows[0]
        return SbomSnapshot(
            id=sbom_id,
            project_id=project_id,
            format=fmt,
            format_version=fmt_version,
            created_at=created_at,
        )

    def get_components(self, snapshot_id: UUID) -> list[Component]:
        query = f"""
        SELECT name, version, type, purl, license
        FROM {self.config.components_table} FINAL
        WHERE sbom_id = {{sbom_id:UUID}}
        ORDER BY name, version
        """
        rows = self.client.query(query, parameters={'sbom_id': str(snapshot_id)}).result_rows
        return [
            Component(
                name=name,
                version=version or '',
                type=ctype or '',
                purl=purl or '',
                license=license_ or '',
                snapshot_id=snapshot_id,
            )
            for name, version, ctype, purl, license_ in rows
        ]

    def get_vulnerability_associations(self, snapshot_id: UUID) -> list[VulnerabilityAssociation]:
        query = f"""
        SELECT component_name, component_version, component_purl, cve_id, severity, detected_at
        FROM {self.config.vulnerabilities_table} FINAL
        WHERE sbom_id = {{sbom_id:UUID}}
        ORDER BY component_name, cve_id
        """
        rows = self.client.query(query, parameters={'sbom_id': str(snapshot_id)}).result_rows
        return [
            VulnerabilityAssociation(
                component_name=name,
                component_version=version or '',
                component_purl=purl or '',
                cve_id=cve_id,
                severity=severity or '',
                detected_at=detected_at,
            )
            for name, version, purl, cve_id, severity, detected_at in rows
        ]

    def list_snapshots(self, project_id: UUID, limit: int = 50) -> Generator[dict, None, None]:
        query = f"""
        SELECT s.id, s.format, s.format_version, s.created_at, c.components
        FROM {self.config.sboms_table} AS s FINAL
        LEFT JOIN (
            SELECT sbom_id, uniqExact(name, version) AS components
            FROM {self.config.components_table} FINAL
            GROUP BY sbom_id
        ) AS c ON c.sbom_id = s.id
        WHERE s.project_id = {{project_id:UUID}}
        ORDER BY s.created_at DESC
        LIMIT {{limit:UInt32}}
        """
        params = {'project_id': str(project_id), 'limit': limit}
        for row in self.client.query(query, parameters=params).result_rows:
            yield {
                'id': row[0],
                'format': row[1],
                'format_version': row[2],
                'created_at': row[3],
                'components': row[4],
            }

    def get_stats(self) -> dict[str, int]:
        """Row counts per table."""
        return {
            table: self.client.query(f'SELECT count() FROM {table} FINAL').result_rows[0][0]
            for table in self.config.tables
        }
