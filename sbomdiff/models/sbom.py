from dataclasses import dataclass
from datetime import datetime
from typing import Any
from uuid import UUID

from pydantic import BaseModel
from pydantic import ConfigDict
from pydantic import field_validator


class SbomSnapshot(BaseModel):
    """One immutable SBOM import for a project."""
    id: UUID
    project_id: UUID
    format: str = ''
    format_version: str = ''
    created_at: datetime | None = None

    model_config = ConfigDict(frozen=True)

    @field_validator('format', mode='before')
    @classmethod
    def normalize_format(cls, v: Any) -> str:
        return str(v or '').strip().lower()


@dataclass(frozen=True)
class Component:
    """A single flattened component row belonging to one snapshot."""
    name: str
    version: str = ''
    type: str = ''
    purl: str = ''
    license: str = ''
    snapshot_id: UUID | None = None

    @property
    def purl_type(self) -> str:
        """Package-url type, e.g. 'npm' for 'pkg:npm/lodash@4.17.21'."""
        return purl_type(self.purl)


@dataclass(frozen=True)
class VulnerabilityAssociation:
    """Links a component (by name) to a CVE within one snapshot."""
    component_name: str
    cve_id: str
    severity: str = ''
    component_version: str = ''
    component_purl: str = ''
    detected_at: datetime | None = None

    @property
    def purl_type(self) -> str:
        return purl_type(self.component_purl)


def purl_type(purl: str | None) -> str:
    if not purl:
        return ''
    value = purl.strip().lower()
    if not value.startswith('pkg:'):
        return ''
    return value[4:].lstrip('/').split('/', 1)[0]
