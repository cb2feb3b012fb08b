"""Pydantic schemas for showcased projects."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field

from codeportfolio.models.views import ProjectView


class ProjectResponse(BaseModel):
    """Project as shown in the editor and on the public page."""

    id: int
    portfolio_id: int
    title: str
    description: str | None
    image_urls: list[str]
    cover_image: str | None
    demo_url: str | None
    github_url: str | None
    tech_stack: list[str]
    display_order: int

    @classmethod
    def from_view(cls, project: ProjectView) -> ProjectResponse:
        return cls(
            id=project.id,
            portfolio_id=project.portfolio_id,
            title=project.title,
            description=project.description,
            image_urls=project.image_urls.to_list(),
            cover_image=project.cover_image,
            demo_url=project.demo_url,
            github_url=project.github_url,
            tech_stack=list(project.tech_stack),
            display_order=project.display_order,
        )


class ProjectRequest(BaseModel):
    """Full set of editable project fields; omitted fields are cleared."""

    model_config = ConfigDict(extra="forbid")

    title: str
    description: str | None = None
    image_urls: list[str] = Field(default_factory=list)
    demo_url: str | None = None
    github_url: str | None = None
    tech_stack: list[str] = Field(default_factory=list)


class ProjectOrderRequest(BaseModel):
    """Project ids in their new display order."""

    model_config = ConfigDict(extra="forbid")

    project_ids: list[int]


class ProjectOrderResponse(BaseModel):
    """Ids whose order was written and ids skipped because they no longer exist."""

    applied: list[int]
    skipped: list[int]
