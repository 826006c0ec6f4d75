"""Component matcher: classifies two component lists into
added / removed / updated / unchanged.

Components are identified by name (or by name and package-url type, see
`identity_key`). Versions are never part of the identity; a version change
on the same identity is exactly what surfaces as "updated".

Within one identity several versions may coexist (vendored copies, multiple
inclusion paths). Versions present on both sides pair up as unchanged first,
the remainder pairs in ascending version-string order, and whatever is left
over on one side is added or removed.
"""
from collections import defaultdict
from collections.abc import Callable
from collections.abc import Hashable
from collections.abc import Iterable
from dataclasses import dataclass
from dataclasses import field
from dataclasses import replace

from sbomdiff.models.diff import DiffComponent
from sbomdiff.models.diff import DiffUpdated
from sbomdiff.models.sbom import Component

IdentityFn = Callable[[Component], Hashable]


@dataclass
class MatchResult:
    added: list[DiffComponent] = field(default_factory=list)
    removed: list[DiffComponent] = field(default_factory=list)
    updated: list[DiffUpdated] = field(default_factory=list)
    unchanged: list[DiffComponent] = field(default_factory=list)


def identity_key(match_key: str = 'name') -> Callable:
    """
    Return the identity function for a match key.

    'name' matches on the exact, case-sensitive component name.
    'name_purl_type' additionally separates ecosystems, so `pkg:npm/util`
    and `pkg:pypi/util` are different components.

    The returned function accepts a Component or a VulnerabilityAssociation.
    """
    if match_key == 'name':
        return _name_of
    if match_key == 'name_purl_type':
        return lambda item: (_name_of(item), item.purl_type)
    raise ValueError(f"Unsupported match key: {match_key!r}")


def _name_of(item) -> str:
    if isinstance(item, Component):
        return item.name
    return item.component_name


def _preference(component: Component) -> tuple[str, str, str]:
    return (component.license or '', component.type or '', component.purl or '')


def dedupe_components(
    components: Iterable[Component] | None,
    key: IdentityFn | None = None,
) -> list[Component]:
    """
    Collapse rows sharing (identity, version) into one logical instance.

    When duplicates disagree on license/type/purl the smallest
    (license, type, purl) wins so the result ignores input order.
    """
    key = key or identity_key('name')
    chosen: dict[tuple[Hashable, str], Component] = {}
    for component in components or ():
        if component.version is None:
            component = replace(component, version='')
        slot = (key(component), component.version)
        current = chosen.get(slot)
        if current is None or _preference(component) < _preference(current):
            chosen[slot] = component
    return list(chosen.values())


def _group(components: list[Component], key: IdentityFn) -> dict[Hashable, dict[str, Component]]:
    groups: dict[Hashable, dict[str, Component]] = defaultdict(dict)
    for component in components:
        groups[key(component)][component.version] = component
    return groups


def _as_diff_component(component: Component) -> DiffComponent:
    return DiffComponent(
        name=component.name,
        version=component.version,
        license=component.license or '',
    )


def _sort_key(identity: Hashable) -> tuple:
    return identity if isinstance(identity, tuple) else (identity,)


def match_components(
    base: Iterable[Component] | None,
    target: Iterable[Component] | None,
    match_key: str = 'name',
) -> MatchResult:
    """Classify base/target components. See module docstring."""
    key = identity_key(match_key)
    base_groups = _group(dedupe_components(base, key), key)
    target_groups = _group(dedupe_components(target, key), key)

    result = MatchResult()
    for identity in sorted(base_groups.keys() | target_groups.keys(), key=_sort_key):
        base_versions = base_groups.get(identity, {})
        target_versions = target_groups.get(identity, {})

        common = base_versions.keys() & target_versions.keys()
        for version in sorted(common):
            result.unchanged.append(_as_diff_component(target_versions[version]))

        base_rest = [base_versions[v] for v in sorted(base_versions.keys() - common)]
        target_rest = [target_versions[v] for v in sorted(target_versions.keys() - common)]

        for old, new in zip(base_rest, target_rest):
            result.updated.append(
                DiffUpdated(
                    name=new.name,
                    old_version=old.version,
                    new_version=new.version,
                ),
            )
        paired = min(len(base_rest), len(target_rest))
        result.removed.extend(_as_diff_component(c) for c in base_rest[paired:])
        result.added.extend(_as_diff_component(c) for c in target_rest[paired:])

    return result
