"""Pydantic models for gist payloads and API responses."""

from pydantic import BaseModel, ConfigDict, Field, field_validator


class GistSummary(BaseModel):
    """One entry of a user's gist list."""

    model_config = ConfigDict(frozen=True)

    id: str = ""
    url: str = ""
    html_url: str = ""
    description: str = ""
    public: bool = False
    created_at: str = ""
    updated_at: str = ""

    @field_validator("id", "url", "html_url", "description", "created_at", "updated_at", mode="before")
    @classmethod
    def _null_as_empty(cls, value):
        return "" if value is None else value


class FileContent(BaseModel):
    """Contents of a single file within a gist."""

    content: str = ""

    @field_validator("content", mode="before")
    @classmethod
    def _null_as_empty(cls, value):
        return "" if value is None else value


class GistDocument(BaseModel):
    """A single gist with the contents of its files."""

    id: str | None = None
    url: str | None = None
    description: str | None = None
    files: dict[str, FileContent] = Field(default_factory=dict)


class GistListResponse(BaseModel):
    """Response model for one page of the gist list."""

    username: str
    page: int
    per_page: int
    gists: list[GistSummary]


class GistStreamResponse(BaseModel):
    """Response model for the full, page-spanning gist list."""

    username: str
    count: int
    gists: list[GistSummary]
    complete: bool = True
    error: str | None = None


class GistDocumentResponse(BaseModel):
    """Response model for a single gist."""

    id: str
    cache_stored: bool = True
    document: GistDocument


class ErrorResponse(BaseModel):
    """Standard error response."""

    error: str
    message: str
    detail: str | None = None


class HealthResponse(BaseModel):
    """Health check response."""

    status: str = "healthy"
    version: str = "1.0.0"
    github_api_reachable: bool = True
    cache_enabled: bool = False
