from dataclasses import dataclass
from typing import Iterable, List, Mapping, Tuple


@dataclass(frozen=True)
class RequiredTagSet:
    """
    Conjunto ordenado de tags obrigatórias.

    A ordem de entrada é preservada (é ela que define a ordem de `missing_tags`)
    e chaves repetidas são descartadas.
    """

    keys: Tuple[str, ...] = ()

    @classmethod
    def from_list(cls, keys: Iterable[str]) -> "RequiredTagSet":
        seen = set()
        ordered: List[str] = []
        for key in keys:
            key = key.strip()
            if not key or key in seen:
                continue
            seen.add(key)
            ordered.append(key)
        return cls(tuple(ordered))

    @classmethod
    def parse(cls, values: Iterable[str]) -> "RequiredTagSet":
        """
        Aceita valores do CLI no formato "a,b" (podendo repetir a flag).
        """
        keys: List[str] = []
        for value in values:
            keys.extend(value.split(","))
        return cls.from_list(keys)

    def missing_from(self, tags: Mapping[str, str]) -> List[str]:
        return [key for key in self.keys if key not in tags]

    def __iter__(self):
        return iter(self.keys)

    def __len__(self) -> int:
        return len(self.keys)
