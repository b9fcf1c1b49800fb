"""Literal and annotation models shared by every node."""

from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, model_validator


class Value(BaseModel):
    """A literal as written in the source: ``32``, ``"nfc"``, ``0x1f``."""

    model_config = ConfigDict(frozen=True)

    text: str

    @model_validator(mode="before")
    @classmethod
    def coerce_scalar(cls, data: Any) -> Any:
        # Plain YAML scalars are accepted in place of {"text": ...}
        if isinstance(data, bool):
            return {"text": "true" if data else "false"}
        if isinstance(data, (int, float, str)):
            return {"text": str(data)}
        return data

    @property
    def is_string(self) -> bool:
        return len(self.text) >= 2 and self.text[0] == '"' and self.text[-1] == '"'

    @property
    def unquoted(self) -> str:
        return self.text[1:-1] if self.is_string else self.text

    def __str__(self) -> str:
        return self.text


class AnnotationValue(BaseModel):
    """One value of an annotation. The literal may be missing in malformed input."""

    model_config = ConfigDict(frozen=True)

    value: Optional[Value] = None

    @model_validator(mode="before")
    @classmethod
    def coerce_literal(cls, data: Any) -> Any:
        if data is None or isinstance(data, (bool, int, float, str)):
            return {"value": data}
        return data


class Annotation(BaseModel):
    """``@name("a", "b")`` or ``@name(key={1, 2})``.

    Unnamed values keep their order in ``values``; named values are grouped
    per key in ``entries``.
    """

    model_config = ConfigDict(frozen=True)

    name: str
    line: int = 0
    values: list[AnnotationValue] = []
    entries: dict[str, list[AnnotationValue]] = {}

    def has_key(self, key: str) -> bool:
        return key in self.entries

    def get_values(self, key: str) -> list[AnnotationValue]:
        return self.entries.get(key, [])


class Version(BaseModel):
    model_config = ConfigDict(frozen=True)

    major: int = 1
    minor: int = 0

    def __str__(self) -> str:
        return f"{self.major}.{self.minor}"
