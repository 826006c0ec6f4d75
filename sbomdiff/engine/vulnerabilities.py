"""Vulnerability delta: which (component, CVE) pairs are new in the target.

Pairs are compared by component identity (name by default), never by
component row, so a CVE that follows a library across a version bump is not
reported again.

With the 'name_purl_type' key an association's ecosystem is taken from its
own purl, else from the snapshot component with the same name and version,
else from the only ecosystem that name has in the snapshot. An association
whose ecosystem stays unknown matches the same name in any ecosystem.
"""
from collections import defaultdict
from collections.abc import Iterable

from sbomdiff.engine.matcher import identity_key
from sbomdiff.models.diff import DiffVulnerability
from sbomdiff.models.sbom import Component
from sbomdiff.models.sbom import VulnerabilityAssociation

SEVERITY_RANK = {
    'CRITICAL': 0,
    'HIGH': 1,
    'MEDIUM': 2,
    'LOW': 3,
}
UNKNOWN_SEVERITY_RANK = len(SEVERITY_RANK)


def severity_rank(severity: str | None) -> int:
    """CRITICAL=0 ... LOW=3, anything else sorts last."""
    return SEVERITY_RANK.get((severity or '').strip().upper(), UNKNOWN_SEVERITY_RANK)


def vulnerability_sort_key(vuln: DiffVulnerability) -> tuple[int, str, str, str]:
    return (severity_rank(vuln.severity), vuln.cve_id, vuln.component, vuln.version)


def _cve_key(cve_id: str | None) -> str:
    return (cve_id or '').strip().upper()


class EcosystemResolver:
    """Resolves the purl type of an association within one snapshot."""

    def __init__(self, components: Iterable[Component] | None = None):
        self._by_version: dict[tuple[str, str], str] = {}
        self._by_name: dict[str, set[str]] = defaultdict(set)
        for component in components or ():
            ptype = component.purl_type
            if not ptype:
                continue
            self._by_version.setdefault((component.name, component.version or ''), ptype)
            self._by_name[component.name].add(ptype)

    def __call__(self, assoc: VulnerabilityAssociation) -> str:
        if assoc.purl_type:
            return assoc.purl_type
        name = assoc.component_name
        ptype = self._by_version.get((name, assoc.component_version or ''))
        if ptype:
            return ptype
        types = self._by_name.get(name, ())
        if len(types) == 1:
            return next(iter(types))
        return ''


def new_vulnerabilities(
    base_assocs: Iterable[VulnerabilityAssociation] | None,
    target_assocs: Iterable[VulnerabilityAssociation] | None,
    match_key: str = 'name',
    base_components: Iterable[Component] | None = None,
    target_components: Iterable[Component] | None = None,
) -> list[DiffVulnerability]:
    """
    Return target (component, CVE) pairs absent from the base.

    CVE ids compare case-insensitively. Severity and version come from the
    target association. Result is sorted by severity rank, then cve_id.
    Components are only consulted for the 'name_purl_type' key.
    """
    identity_key(match_key)  # rejects unknown keys
    by_ecosystem = match_key == 'name_purl_type'
    base_ecosystem = EcosystemResolver(base_components if by_ecosystem else None)
    target_ecosystem = EcosystemResolver(target_components if by_ecosystem else None)

    # (name, cve) -> ecosystems seen in the base; '' means unknown
    known: dict[tuple[str, str], set[str]] = defaultdict(set)
    for assoc in base_assocs or ():
        cve = _cve_key(assoc.cve_id)
        if cve:
            ptype = base_ecosystem(assoc) if by_ecosystem else ''
            known[(assoc.component_name, cve)].add(ptype)

    found: dict[tuple, DiffVulnerability] = {}
    for assoc in target_assocs or ():
        cve = _cve_key(assoc.cve_id)
        if not cve:
            continue
        ptype = target_ecosystem(assoc) if by_ecosystem else ''
        seen = known.get((assoc.component_name, cve))
        if seen and (not by_ecosystem or not ptype or ptype in seen or '' in seen):
            continue
        slot = (assoc.component_name, ptype, cve, assoc.component_version)
        candidate = DiffVulnerability(
            cve_id=assoc.cve_id.strip(),
            component=assoc.component_name,
            version=assoc.component_version,
            severity=assoc.severity,
        )
        current = found.get(slot)
        # duplicate rows: keep the most severe reading
        if current is None or vulnerability_sort_key(candidate) < vulnerability_sort_key(current):
            found[slot] = candidate

    return sorted(found.values(), key=vulnerability_sort_key)
