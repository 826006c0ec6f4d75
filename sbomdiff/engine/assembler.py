"""Diff assembler: composes matcher and vulnerability delta output into a
DiffResult with summary counts and a fixed ordering."""
from collections.abc import Iterable

from sbomdiff.engine.matcher import match_components
from sbomdiff.engine.matcher import MatchResult
from sbomdiff.engine.vulnerabilities import new_vulnerabilities
from sbomdiff.engine.vulnerabilities import vulnerability_sort_key
from sbomdiff.models.diff import DiffComponent
from sbomdiff.models.diff import DiffResult
from sbomdiff.models.diff import DiffSummary
from sbomdiff.models.diff import DiffVulnerability
from sbomdiff.models.sbom import Component
from sbomdiff.models.sbom import VulnerabilityAssociation


def _component_order(item: DiffComponent) -> tuple[str, str, str]:
    return (item.name, item.version, item.license)


def assemble_diff(
    match: MatchResult | None,
    vulnerabilities: Iterable[DiffVulnerability] | None,
) -> DiffResult:
    """Build the final result. Missing inputs become empty lists."""
    match = match or MatchResult()
    added = sorted(match.added or [], key=_component_order)
    removed = sorted(match.removed or [], key=_component_order)
    updated = sorted(
        match.updated or [],
        key=lambda u: (u.name, u.old_version, u.new_version),
    )
    vulns = sorted(vulnerabilities or [], key=vulnerability_sort_key)

    return DiffResult(
        summary=DiffSummary(
            added_count=len(added),
            removed_count=len(removed),
            updated_count=len(updated),
            new_vulnerabilities_count=len(vulns),
        ),
        added=added,
        removed=removed,
        updated=updated,
        new_vulnerabilities=vulns,
    )


def compute_diff(
    base_components: Iterable[Component] | None,
    target_components: Iterable[Component] | None,
    base_assocs: Iterable[VulnerabilityAssociation] | None = None,
    target_assocs: Iterable[VulnerabilityAssociation] | None = None,
    match_key: str = 'name',
) -> DiffResult:
    """Run matcher, vulnerability delta and assembler on in-memory lists."""
    base_components = list(base_components or ())
    target_components = list(target_components or ())
    match = match_components(base_components, target_components, match_key=match_key)
    vulns = new_vulnerabilities(
        base_assocs, target_assocs, match_key=match_key,
        base_components=base_components, target_components=target_components,
    )
    return assemble_diff(match, vulns)
