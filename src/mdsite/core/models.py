"""Data models shared across the build pipeline"""

import datetime
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path, PurePosixPath
from types import MappingProxyType
from typing import Any, Mapping, Optional, Union

from pydantic import BaseModel, ConfigDict, Field

from mdsite.core.errors import BuildError, DocumentError


class Frontmatter(BaseModel):
    """Decoded metadata block of one source document."""
    model_config = ConfigDict(frozen=True)

    title:    str
    date:     Optional[datetime.date] = None
    tags:     tuple[str, ...] = ()
    slug:     Optional[str] = None
    template: Optional[str] = None
    extra:    dict[str, Any] = Field(default_factory=dict)   # unrecognized keys, passed through


class Directive(BaseModel):
    """Unresolved {{ name key=value }} placeholder left in a compiled body."""
    model_config = ConfigDict(frozen=True)

    name:   str
    params: dict[str, str] = Field(default_factory=dict)
    source: str
    line:   int


Segment = Union[str, Directive]


class Document(BaseModel):
    """One authored page: metadata plus a body of HTML strings and directives.

    The body produced by the compiler interleaves rendered HTML with
    Directive nodes. Resolution yields a copy whose body is a single string.
    """
    model_config = ConfigDict(frozen=True)

    path:     str                       # relative POSIX path under the source root
    slug:     str
    title:    str
    date:     Optional[datetime.date] = None
    tags:     tuple[str, ...] = ()
    template: Optional[str] = None
    meta:     dict[str, Any] = Field(default_factory=dict)
    body:     tuple[Segment, ...] = ()

    @property
    def output_path(self) -> PurePosixPath:
        """Rendered page location: the source directory with the slug as file name."""
        return PurePosixPath(self.path).parent / f"{self.slug}.html"

    @property
    def directives(self) -> list[Directive]:
        return [s for s in self.body if isinstance(s, Directive)]

    @property
    def is_resolved(self) -> bool:
        return not self.directives

    @property
    def html(self) -> str:
        """Body HTML; only defined once every directive has been resolved."""
        if not self.is_resolved:
            raise ValueError(f"{self.path} still has unresolved directives")
        return "".join(self.body)

    def url(self, base_url: str = "/") -> str:
        return base_url.rstrip("/") + "/" + self.output_path.as_posix()


@dataclass(frozen=True)
class SiteIndex:
    """Global, read-only view of every parsed document.

    documents:    all documents, newest first, undated last, ties by path
    posts:        dated documents only, same order (chronological listings)
    tags:         tag -> documents carrying that tag, same order
    destinations: output path -> source path for every page and asset
    """
    documents:    tuple[Document, ...]
    posts:        tuple[Document, ...]
    tags:         Mapping[str, tuple[Document, ...]]
    destinations: Mapping[str, str]


@dataclass(frozen=True)
class Template:
    """Page skeleton with {{ slot }} markers."""
    name:   str
    path:   str
    source: str
    slots:  frozenset[str] = frozenset()


@dataclass(frozen=True)
class RenderOptions:
    """Presentation settings needed by the resolver and the template applier."""
    base_url:    str = "/"
    date_format: str = "%Y-%m-%d"

    def format_date(self, value: Optional[datetime.date]) -> str:
        return value.strftime(self.date_format) if value else ""


@dataclass(frozen=True)
class SourceTree:
    """Classified contents of a source root (relative POSIX paths, sorted)."""
    root:      Path
    content:   tuple[str, ...] = ()
    templates: tuple[str, ...] = ()
    assets:    tuple[str, ...] = ()


class BuildStatus(str, Enum):
    """Outcome of a whole build"""
    success = "success"     # every document written
    partial = "partial"     # some documents dropped with per-document errors
    fatal = "fatal"         # aborted; output missing or incomplete


@dataclass
class BuildReport:
    """Result of build_site: status, written files, collected errors."""
    status: BuildStatus = BuildStatus.success
    pages:  list[str] = field(default_factory=list)
    assets: list[str] = field(default_factory=list)
    errors: list[DocumentError] = field(default_factory=list)
    fatal:  Optional[BuildError] = None


def freeze_mapping(data: dict) -> Mapping:
    """Return a read-only view of data."""
    return MappingProxyType(dict(data))
