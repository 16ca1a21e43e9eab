"""Parameter models for the ClearCase tools.

Field names are the camelCase argument names MCP hosts send. Each
model doubles as the tool's JSON schema and as its validator.
"""

from __future__ import annotations

from pydantic import BaseModel, Field


class NoParams(BaseModel):
    """Tools that take no arguments."""


class ResourcePathParams(BaseModel):
    resourcePath: str = Field(description="Path to the resource")


class ResourcePathsParams(BaseModel):
    resourcePaths: list[str] = Field(description="List of resource paths")


class ActivityParams(BaseModel):
    activityId: str | None = Field(
        default=None, description="ID of the activity to set (optional)"
    )
    activityHeadline: str | None = Field(
        default=None, description="Headline for the new activity (optional)"
    )
    setActivity: bool = Field(description="Whether to set the activity after creation")


class SetActivityParams(BaseModel):
    activityId: str = Field(description="ID of the activity to set")


class ListActivitiesParams(BaseModel):
    currentOnly: bool | None = Field(
        default=None, description="Only show the activity set in the current view"
    )


class CheckoutParams(BaseModel):
    resourcePaths: list[str] = Field(description="List of resource paths to checkout")
    comment: str | None = Field(
        default=None, description="Comment for the checkout operation"
    )


class UndoCheckoutParams(BaseModel):
    resourcePaths: list[str] = Field(
        description="List of resource paths to undo checkout"
    )
    keepChanges: bool | None = Field(
        default=None, description="Whether to keep local changes"
    )


class CheckinParams(BaseModel):
    resourcePaths: list[str] = Field(description="List of resource paths to check in")
    comment: str | None = Field(
        default=None, description="Comment for the check-in operation"
    )
    checkinIdentical: bool | None = Field(
        default=None, description="Whether to allow check-in of identical files"
    )


class AddResourcesParams(BaseModel):
    resourcePaths: list[str] = Field(description="List of resource paths to add")
    comment: str | None = Field(default=None, description="Comment for the add operation")


class LoginParams(BaseModel):
    wanServer: str = Field(description="WAN server URL")
    username: str = Field(description="Username")
    password: str = Field(description="Password")


class ViewParams(BaseModel):
    viewPath: str = Field(description="Path to the view")


class RenameParams(BaseModel):
    resourcePath: str = Field(description="Path to the resource to rename")
    newName: str = Field(description="New name for the resource")


class FileParams(BaseModel):
    filePath: str = Field(description="Path to the file to open")


class ListCheckoutsParams(BaseModel):
    path: str | None = Field(
        default=None, description="Directory or file to restrict the listing to (optional)"
    )
