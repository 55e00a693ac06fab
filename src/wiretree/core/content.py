"""Rendered results and page updates."""

from collections import OrderedDict
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Union


@dataclass(frozen=True)
class ScriptPayload:
    """Script to execute on the page. No view is rendered."""

    code: str
    kind = "script"

    def __str__(self) -> str:
        return self.code

    def __html__(self) -> str:
        return self.code


@dataclass(frozen=True)
class RawPayload:
    """Payload sent to the client as-is.

    Bytes are kept untouched; text forms replace undecodable bytes with U+FFFD.
    """

    payload: Union[str, bytes]
    kind = "raw"

    def __str__(self) -> str:
        if isinstance(self.payload, bytes):
            return self.payload.decode("utf-8", errors="replace")
        return self.payload

    def __html__(self) -> str:
        return str(self)


@dataclass(frozen=True)
class Empty:
    kind = "empty"

    def __str__(self) -> str:
        return ""

    def __html__(self) -> str:
        return ""


@dataclass(frozen=True)
class Fragment:
    """Rendered markup, together with the child output it was composed from."""

    markup: str
    children: "OrderedDict[str, Any]" = field(
        default_factory=OrderedDict, compare=False
    )
    kind = "fragment"

    def __str__(self) -> str:
        return self.markup

    def __html__(self) -> str:
        return self.markup


RenderedResult = Union[ScriptPayload, RawPayload, Empty, Fragment]


class UpdateMode(str, Enum):
    REPLACE_WHOLE = "replace"
    REPLACE_INNER = "replace_inner"


@dataclass(frozen=True)
class PageUpdate:
    """Instruction telling the client how to swap a widget's content."""

    mode: UpdateMode
    target: str
    content: RenderedResult

    @classmethod
    def for_content(
        cls, target: str, content: RenderedResult, replace_inner: bool = False
    ) -> "PageUpdate":
        mode = UpdateMode.REPLACE_INNER if replace_inner else UpdateMode.REPLACE_WHOLE
        return cls(mode=mode, target=target, content=content)

    @property
    def replace_inner(self) -> bool:
        return self.mode is UpdateMode.REPLACE_INNER

    def to_dict(self) -> Dict[str, Any]:
        return {
            "mode": self.mode.value,
            "target": self.target,
            "kind": self.content.kind,
            "content": str(self.content),
        }

    def __str__(self) -> str:
        return str(self.content)

    def __html__(self) -> str:
        return self.content.__html__()
