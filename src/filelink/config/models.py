from __future__ import annotations

from typing import Annotated, List, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator

from ..resources.base import DEFAULT_DOMAIN, SEPARATOR

LAST_MODIFIED_PARAMETER_NAME = "lastModified"
LAST_MODIFIED_HEADER_NAME = "X-FileLink-LastModified"
EXPORTING_HEADER_NAME = "X-FileLink-Exporting"
OPEN_FILE_MODULE = "filelink_openfile"


# Stores
class LocalStore(BaseModel):
    type: Literal["local"]
    root: str

    model_config = ConfigDict(extra="allow")


class S3Store(BaseModel):
    type: Literal["s3"]
    bucket: str
    prefix: str | None = None
    region: str | None = None

    model_config = ConfigDict(extra="allow")


StoreConfig = Annotated[Union[LocalStore, S3Store], Field(discriminator="type")]


class BookConfig(BaseModel):
    domain: str = DEFAULT_DOMAIN
    path: str = SEPARATOR
    # Books without a store, or marked inaccessible, resolve to no store.
    accessible: bool = True
    store: Optional[StoreConfig] = None

    @field_validator("path")
    @classmethod
    def _book_path(cls, value: str) -> str:
        if not value.startswith(SEPARATOR):
            raise ValueError(f"book path must start with {SEPARATOR!r}")
        return value


class RenderConfig(BaseModel):
    context_path: str = ""
    last_modified_param: str = LAST_MODIFIED_PARAMETER_NAME
    last_modified_header: str = LAST_MODIFIED_HEADER_NAME
    exporting_header: str = EXPORTING_HEADER_NAME
    link_css_class: Optional[str] = None
    open_file_module: str = OPEN_FILE_MODULE


class ExperimentalConfig(BaseModel):
    observability_otel: bool = False


class FilelinkConfig(BaseModel):
    project: str = "filelink"
    run_profile: str = "default"

    books: List[BookConfig] = Field(default_factory=list)
    render: RenderConfig = Field(default_factory=RenderConfig)
    experimental: Optional[ExperimentalConfig] = None

    # allow extra to keep forward-compatible
    model_config = ConfigDict(extra="allow")


__all__ = [
    "LAST_MODIFIED_PARAMETER_NAME",
    "LAST_MODIFIED_HEADER_NAME",
    "EXPORTING_HEADER_NAME",
    "OPEN_FILE_MODULE",
    "FilelinkConfig",
    "BookConfig",
    "LocalStore",
    "S3Store",
    "StoreConfig",
    "RenderConfig",
    "ExperimentalConfig",
]
