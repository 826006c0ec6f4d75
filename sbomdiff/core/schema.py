SBOMS_DDL = """
CREATE TABLE IF NOT EXISTS sboms (
    id UUID COMMENT 'SBOM Snapshot ID',
    project_id UUID COMMENT 'Owning Project ID',
    format LowCardinality(String) COMMENT 'Document Format (cyclonedx, spdx)',
    format_version String DEFAULT '' COMMENT 'Document Format Version',
    created_at DateTime COMMENT 'Import Time',
    updated_at DateTime DEFAULT now() COMMENT 'Last Updated Time'
) ENGINE = ReplacingMergeTree(updated_at)
ORDER BY (id)
""".strip()

COMPONENTS_DDL = """
CREATE TABLE IF NOT EXISTS components (
    id UUID COMMENT 'Component Row ID',
    sbom_id UUID COMMENT 'SBOM Snapshot ID',
    name String COMMENT 'Component Name',
    version String DEFAULT '' COMMENT 'Component Version',
    type LowCardinality(String) DEFAULT '' COMMENT 'Component Type',
    purl String DEFAULT '' COMMENT 'Package URL',
    license String DEFAULT '' COMMENT 'License Expression',
    created_at DateTime DEFAULT now() COMMENT 'Creation Time'
) ENGINE = ReplacingMergeTree(created_at)
ORDER BY (sbom_id, name, version, id)
""".strip()

COMPONENT_VULNERABILITIES_DDL = """
CREATE TABLE IF NOT EXISTS component_vulnerabilities (
    sbom_id UUID COMMENT 'SBOM Snapshot ID',
    component_id UUID COMMENT 'Component Row ID',
    component_name String COMMENT 'Component Name',
    component_version String DEFAULT '' COMMENT 'Component Version',
    component_purl String DEFAULT '' COMMENT 'Component Package URL',
    cve_id String COMMENT 'CVE Identifier',
    severity LowCardinality(String) DEFAULT '' COMMENT 'CRITICAL, HIGH, MEDIUM, LOW',
    detected_at DateTime DEFAULT now() COMMENT 'Detection Time'
) ENGINE = ReplacingMergeTree(detected_at)
ORDER BY (sbom_id, component_name, cve_id, component_id)
""".strip()

ALL_DDL = (SBOMS_DDL, COMPONENTS_DDL, COMPONENT_VULNERABILITIES_DDL)
