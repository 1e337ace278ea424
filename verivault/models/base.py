from dataclasses import fields
from typing import Any, Dict, Iterable


def camel_to_snake(name: str) -> str:
    out = []
    for char in name:
        if char.isupper():
            out.append('_')
            out.append(char.lower())
        else:
            out.append(char)
    return ''.join(out)


class RecordMixin:
    """
    Shared behaviour for in-memory records

    READ_ONLY_FIELDS are never touched by merge(); every other dataclass
    field can be overwritten by its camelCase API key.
    """
    READ_ONLY_FIELDS: Iterable[str] = ('id',)

    def merge(self, data: Dict[str, Any]) -> None:
        """Shallow merge of an API payload onto the record"""
        names = {f.name for f in fields(self)}
        for key, value in (data or {}).items():
            attr = camel_to_snake(key)
            if attr in names and attr not in self.READ_ONLY_FIELDS:
                setattr(self, attr, value)
