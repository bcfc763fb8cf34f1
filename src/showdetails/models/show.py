from __future__ import annotations

from pydantic import AliasChoices, BaseModel, ConfigDict, Field


class ShowDetails(BaseModel):
    """Resolved supplementary content for one show instance.

    Serialised with the camelCase field names used by the content repository
    (``{"showId": ..., "description": ...}``).
    """

    model_config = ConfigDict(frozen=True, serialize_by_alias=True)

    show_id: str = Field(
        min_length=1,
        validation_alias=AliasChoices("showId", "ShowId", "show_id"),
        serialization_alias="showId",
    )
    description: str = Field(
        default="",
        validation_alias=AliasChoices("description", "Description"),
    )

    @property
    def is_empty(self) -> bool:
        return not self.description.strip()


class ContentsEnvelope(BaseModel):
    """Subset of the GitHub ``repos/{owner}/{repo}/contents/{path}`` response."""

    content: str
    encoding: str = "base64"
    path: str | None = None
    sha: str | None = None
