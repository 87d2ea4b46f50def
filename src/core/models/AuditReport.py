from dataclasses import dataclass, field
from typing import Any, Dict, List, Mapping

from .ResourceRecord import ResourceRecord


@dataclass
class AuditReport:
    """
    Relatório de um audit. Os recursos ficam na ordem de chegada dos providers.
    """

    resources: List[ResourceRecord] = field(default_factory=list)

    def add(self, record: ResourceRecord) -> None:
        self.resources.append(record)

    def summary(self) -> Dict[str, int]:
        total = len(self.resources)
        non_compliant = sum(1 for r in self.resources if not r.compliant)
        return {
            "total_resources": total,
            "compliant": total - non_compliant,
            "non_compliant": non_compliant,
        }

    def to_dict(self) -> Dict[str, Any]:
        return {
            "resources": [r.to_dict() for r in self.resources],
            "summary": self.summary(),
        }

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "AuditReport":
        # summary é derivado, não precisa ser lido de volta
        return cls(
            resources=[ResourceRecord.from_dict(r) for r in data.get("resources") or []],
        )
