"""Result contract of a snapshot comparison.

Field names and nesting are the JSON wire format of
POST /api/v1/sbom/diff.
"""
from pydantic import BaseModel
from pydantic import Field


class DiffSummary(BaseModel):
    added_count: int = 0
    removed_count: int = 0
    updated_count: int = 0
    new_vulnerabilities_count: int = 0


class DiffComponent(BaseModel):
    """A component present on one side only."""
    name: str
    version: str
    license: str = ''


class DiffUpdated(BaseModel):
    """A component whose version changed between base and target."""
    name: str
    old_version: str
    new_version: str


class DiffVulnerability(BaseModel):
    """A (component, CVE) pair first observed in the target snapshot."""
    cve_id: str
    component: str
    version: str
    severity: str


class DiffResult(BaseModel):
    summary: DiffSummary = Field(default_factory=DiffSummary)
    added: list[DiffComponent] = Field(default_factory=list)
    removed: list[DiffComponent] = Field(default_factory=list)
    updated: list[DiffUpdated] = Field(default_factory=list)
    new_vulnerabilities: list[DiffVulnerability] = Field(default_factory=list)

    @property
    def is_empty(self) -> bool:
        return not (self.added or self.removed or self.updated or self.new_vulnerabilities)
