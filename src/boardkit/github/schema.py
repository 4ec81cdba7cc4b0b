"""Typed decoding of GitHub GraphQL responses.

Each query and mutation the graph client sends has a response model here.
Raw ``data`` dicts are validated through ``decode`` before anything reads them,
so a schema change on GitHub's side surfaces as ``ResponseShapeError``.
"""

from __future__ import annotations

from typing import Any, TypeVar

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from boardkit.github.exceptions import ResponseShapeError
from boardkit.github.models import FieldOption, SingleSelectField

T = TypeVar("T", bound=BaseModel)


class _Model(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="ignore")


def decode(model: type[T], data: dict[str, Any]) -> T:
    """Validate ``data`` against ``model``.

    Raises:
        ResponseShapeError: If the data does not match.
    """
    try:
        return model.model_validate(data)
    except ValidationError as e:
        raise ResponseShapeError(f"Unexpected {model.__name__} response: {e}") from e


# Shared fragments


class NodeRef(_Model):
    id: str


class OptionNode(_Model):
    id: str
    name: str
    color: str = "GRAY"
    description: str | None = ""


class SingleSelectFieldNode(_Model):
    """A project field; non single-select fields come back as empty objects."""

    id: str | None = None
    name: str | None = None
    options: list[OptionNode] | None = None

    @property
    def is_single_select(self) -> bool:
        return self.id is not None and self.name is not None and self.options is not None

    def to_field(self) -> SingleSelectField:
        if not self.is_single_select:
            raise ResponseShapeError("Field is not a single-select field")
        return SingleSelectField(
            field_id=str(self.id),
            name=str(self.name),
            options=tuple(
                FieldOption(
                    option_id=opt.id,
                    name=opt.name,
                    color=opt.color,
                    description=opt.description or "",
                )
                for opt in self.options or []
            ),
        )


# resolve_owner_and_repo_ids


class RepositoryWithOwner(_Model):
    id: str
    owner: NodeRef


class RepositoryIdsData(_Model):
    repository: RepositoryWithOwner | None


# create_project


class ProjectNode(_Model):
    id: str
    number: int
    url: str


class CreateProjectPayload(_Model):
    project: ProjectNode = Field(alias="projectV2")


class CreateProjectData(_Model):
    payload: CreateProjectPayload = Field(alias="createProjectV2")


# get_single_select_fields


class FieldConnection(_Model):
    nodes: list[SingleSelectFieldNode | None]


class ProjectFields(_Model):
    fields: FieldConnection


class ProjectFieldsData(_Model):
    node: ProjectFields | None


# create_single_select_field / update options


class FieldPayload(_Model):
    field: SingleSelectFieldNode = Field(alias="projectV2Field")


class CreateFieldData(_Model):
    payload: FieldPayload = Field(alias="createProjectV2Field")


class UpdateFieldData(_Model):
    payload: FieldPayload = Field(alias="updateProjectV2Field")


# resolve_issue_node_id


class RepositoryIssue(_Model):
    issue: NodeRef | None


class IssueNodeData(_Model):
    repository: RepositoryIssue | None


# add_item_to_project


class AddItemPayload(_Model):
    item: NodeRef


class AddItemData(_Model):
    payload: AddItemPayload = Field(alias="addProjectV2ItemById")


# set_single_select_field_value


class UpdateItemPayload(_Model):
    item: NodeRef = Field(alias="projectV2Item")


class UpdateItemFieldData(_Model):
    payload: UpdateItemPayload = Field(alias="updateProjectV2ItemFieldValue")
