"""Data models for segmentation, extraction, and page acquisition"""

from pydantic import BaseModel, ConfigDict, Field


class GenerationRequest(BaseModel):
    """Payload handed to an external code-generation step for one chosen section."""
    html: str
    label: str


class Section(BaseModel):
    """An independently convertible region of a page; created per segmentation run, never mutated."""
    model_config = ConfigDict(frozen=True)

    id: str                         # unique within one run; derived from position + label
    label: str
    html: str                       # serialized outer markup, self-contained

    def to_request(self) -> GenerationRequest:
        return GenerationRequest(html=self.html, label=self.label)


class ScrapedPage(BaseModel):
    """Fetched page: full markup plus stylesheet references, image URLs, and title."""
    html: str
    styles: list[str] = Field(default_factory=list)
    images: list[str] = Field(default_factory=list)
    title: str = "Untitled"


class ComponentMetadata(BaseModel):
    name: str = "Component"
    props: list[str] = Field(default_factory=list)
