"""
Versioned envelope for synchronization reports.

Reports written by run_sync.py are wrapped with a schema version so that
tools reading older report files can tell which layout they hold.
"""

from dataclasses import dataclass
from typing import Any, Dict


class SchemaVersion:
    """
    Report schema version identifiers.

    Versions:
        V1_0: commands and apply summary
    """

    V1_0 = "1.0"
    CURRENT = V1_0
    KNOWN = (V1_0,)


@dataclass
class VersionedReport:
    """
    Report data with version information.

    Attributes:
        schema_version: Version identifier
        data: Report content

    Examples:
        >>> report = VersionedReport(data={"commands": []})
        >>> report.to_dict()["schema_version"]
        '1.0'
    """

    data: Dict[str, Any]
    schema_version: str = SchemaVersion.CURRENT

    def to_dict(self) -> Dict[str, Any]:
        return {
            "schema_version": self.schema_version,
            "data": self.data
        }

    @classmethod
    def from_dict(cls, d: Dict[str, Any]) -> 'VersionedReport':
        """
        Create an instance from a loaded report.

        Files written before versioning have no schema_version and are
        treated as V1_0.

        Raises:
            ValueError: If the version is not a known one
        """
        version = d.get("schema_version", SchemaVersion.V1_0)
        if version not in SchemaVersion.KNOWN:
            raise ValueError(f"Unknown report schema version: {version}")

        return cls(data=d.get("data", {}), schema_version=version)
