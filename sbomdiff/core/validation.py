"""Snapshot id validation for sbomdiff."""
from uuid import UUID

from sbomdiff.core.errors import ValidationError


def parse_snapshot_id(value: str | UUID | None, label: str = 'sbom') -> UUID:
    """
    Parse a snapshot identifier.

    Accepts a UUID instance or any string form `uuid.UUID` understands
    (hyphenated, braced, urn:uuid:).

    Raises:
        ValidationError: with message "invalid <label> id"
    """
    if isinstance(value, UUID):
        return value
    if not isinstance(value, str) or not value.strip():
        raise ValidationError(f"invalid {label} id")
    try:
        return UUID(value.strip())
    except ValueError:
        raise ValidationError(f"invalid {label} id")


def validate_diff_ids(
    base_id: str | UUID | None,
    target_id: str | UUID | None,
) -> tuple[UUID, UUID]:
    """
    Validate a diff request pair.

    Both ids must parse and must differ.

    Returns:
        (base_uuid, target_uuid)

    Raises:
        ValidationError
    """
    base_uuid = parse_snapshot_id(base_id, 'base sbom')
    target_uuid = parse_snapshot_id(target_id, 'target sbom')
    if base_uuid == target_uuid:
        raise ValidationError('base and target sbom must be different')
    return base_uuid, target_uuid
