"""Smart simulator data models."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field, model_validator
from pydantic.alias_generators import to_camel


class ContentProfile(BaseModel):
    """Classifier output: what the simulator should render for a command.

    Exactly one of ``items`` / ``custom_content`` drives the rendered body;
    a profile carrying a custom block never carries items.
    """

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, frozen=True)

    category: str = "generic"
    title: str
    items: list[str] = Field(default_factory=list)
    custom_content: str | None = None
    tip: str | None = None

    @model_validator(mode="after")
    def _custom_content_excludes_items(self) -> ContentProfile:
        if self.custom_content is not None and self.items:
            msg = "items must be empty when custom_content is set"
            raise ValueError(msg)
        return self


class SimulationResult(BaseModel):
    """What the experience writer produced for one command."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    profile: ContentProfile
    note_path: str | None = Field(default=None, description="Workspace-relative path of the written note.")
    component_source: str | None = Field(default=None, description="TSX source, component mode only.")
