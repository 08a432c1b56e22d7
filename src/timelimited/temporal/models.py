"""
Data types shared by the scanner, matcher, rewriter and listing.
"""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Optional, Tuple


class TagKind(Enum):
    START = "start"
    END = "end"


class Classification(Enum):
    ACTIVE = "active"
    EXPIRED = "expired"


class DiagnosticKind(Enum):
    ATTRIBUTE_ERROR = "AttributeError"
    STRUCTURAL_ERROR = "StructuralError"
    UNWRAP_INELIGIBLE = "UnwrapIneligible"


@dataclass(frozen=True)
class Tag:
    """
    A marker comment found in the source text.

    offset/end cover the whole comment, delimiters included. line is 1-based,
    column 0-based.
    """

    kind: TagKind
    offset: int
    end: int
    line: int
    column: int
    raw_attributes: Optional[str] = None


@dataclass(frozen=True)
class Attributes:
    expiry: datetime
    unwrap: bool = False
    comment: Optional[str] = None
    skip: bool = False


@dataclass(frozen=True)
class Block:
    """A matched start/end pair with the blocks nested directly inside it."""

    start_tag: Tag
    end_tag: Tag
    attributes: Optional[Attributes] = None
    attribute_error: Optional[str] = None
    children: Tuple["Block", ...] = ()

    @property
    def inner_span(self) -> Tuple[int, int]:
        return self.start_tag.end, self.end_tag.offset

    @property
    def outer_span(self) -> Tuple[int, int]:
        return self.start_tag.offset, self.end_tag.end

    @property
    def is_unwrap(self) -> bool:
        return self.attributes is not None and self.attributes.unwrap


@dataclass(frozen=True)
class Diagnostic:
    kind: DiagnosticKind
    message: str
    line: Optional[int] = None
    column: Optional[int] = None

    def __str__(self) -> str:
        if self.line is None:
            return f"{self.kind.value}: {self.message}"
        return f"{self.kind.value} at {self.line}:{self.column}: {self.message}"


@dataclass(frozen=True)
class Edit:
    """Replace text[start:end] with replacement."""

    start: int
    end: int
    replacement: str = ""


@dataclass
class TransformResult:
    text: str
    diagnostics: list = field(default_factory=list)
    changed: bool = False

    @property
    def is_fatal(self) -> bool:
        return any(d.kind is DiagnosticKind.STRUCTURAL_ERROR for d in self.diagnostics)
