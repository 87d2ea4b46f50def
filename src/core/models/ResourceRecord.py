from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Dict, Mapping, Optional, Tuple

from .RequiredTagSet import RequiredTagSet


@dataclass(frozen=True)
class ResourceRecord:
    """
    Resultado de compliance de um recurso AWS.

    `missing_tags` segue a ordem das tags obrigatórias informadas.
    `tags` é uma view somente-leitura sobre uma cópia das tags recebidas.
    """

    service: str
    resource_id: str
    resource_type: str
    tags: Mapping[str, str] = field(default_factory=dict, hash=False)
    missing_tags: Tuple[str, ...] = ()

    def __post_init__(self) -> None:
        object.__setattr__(self, "tags", MappingProxyType(dict(self.tags)))
        object.__setattr__(self, "missing_tags", tuple(self.missing_tags))

    @classmethod
    def build(
        cls,
        service: str,
        resource_id: str,
        resource_type: str,
        tags: Optional[Mapping[str, str]],
        required_tags: RequiredTagSet,
    ) -> "ResourceRecord":
        tags = tags or {}
        return cls(
            service=service,
            resource_id=resource_id,
            resource_type=resource_type,
            tags=tags,
            missing_tags=required_tags.missing_from(tags),
        )

    @property
    def compliant(self) -> bool:
        return not self.missing_tags

    def to_dict(self) -> Dict[str, Any]:
        return {
            "service": self.service,
            "resource_id": self.resource_id,
            "resource_type": self.resource_type,
            "tags": dict(self.tags),
            "missing_tags": list(self.missing_tags),
        }

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "ResourceRecord":
        return cls(
            service=data["service"],
            resource_id=data["resource_id"],
            resource_type=data["resource_type"],
            tags=data.get("tags") or {},
            missing_tags=data.get("missing_tags") or (),
        )
