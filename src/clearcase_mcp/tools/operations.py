"""ClearCase tool table.

Each handler builds a cleartool argument vector from its validated
parameters and hands it to the runner. Batch tools run one process per
path concurrently and report results in request order.
"""

from __future__ import annotations

import asyncio
import re
from typing import TYPE_CHECKING

from clearcase_mcp.core.errors import OperationInputError
from clearcase_mcp.tools import params as p
from clearcase_mcp.tools.base import Operation, OperationContext, OperationResult
from clearcase_mcp.tools.registry import OperationRegistry
from clearcase_mcp.tools.runner import CleartoolRunner

if TYPE_CHECKING:
    from collections.abc import Callable, Sequence

    from clearcase_mcp.config.schema import ClearCaseMcpConfig

_CREATED_ACTIVITY = re.compile(r'activity\s+"([^"]+)"')


# ── Helpers ──────────────────────────────────────────────────────


def escape_comment(comment: str | None, default: str) -> str:
    """Escape embedded double quotes, falling back to *default*."""
    return comment.replace('"', '\\"') if comment else default


def parse_activity_id(output: str) -> str:
    """Extract the activity id from ``mkactivity`` output.

    ``Created activity "fix_login".`` yields ``fix_login``; anything
    else yields the first line as-is.
    """
    first = output.split("\n")[0].strip()
    match = _CREATED_ACTIVITY.search(first)
    return match.group(1) if match else first


async def run_batch(
    ctx: OperationContext,
    paths: Sequence[str],
    build_args: Callable[[str], list[str]],
    label: str,
    error_label: str,
) -> OperationResult:
    """Run one command per path concurrently, preserving request order.

    Every item runs to completion. If any fails, the error result
    lists each path with its own outcome.
    """
    results = await asyncio.gather(
        *(ctx.runner.run(build_args(path)) for path in paths),
        return_exceptions=True,
    )
    for result in results:
        if isinstance(result, BaseException) and not isinstance(result, Exception):
            raise result

    failed = sum(1 for r in results if isinstance(r, Exception))
    if not failed:
        return OperationResult.success(label, "\n".join(str(r) for r in results))

    lines = [f"{failed} of {len(paths)} failed"]
    for path, result in zip(paths, results, strict=True):
        if isinstance(result, Exception):
            lines.append(f"[failed] {path}: {result}")
        else:
            lines.append(f"[ok] {path}: {result}")
    return OperationResult.failure(error_label, "\n".join(lines))


# ── Views ────────────────────────────────────────────────────────


async def get_views(params: p.NoParams, ctx: OperationContext) -> OperationResult:
    output = await ctx.runner.run(["lsview"])
    return OperationResult.success("Views", output)


async def add_view(params: p.ViewParams, ctx: OperationContext) -> OperationResult:
    output = await ctx.runner.run(["mkview", params.viewPath])
    return OperationResult.success("View added successfully", output)


async def update_view(params: p.ViewParams, ctx: OperationContext) -> OperationResult:
    output = await ctx.runner.run(["setcs", "-current", params.viewPath])
    return OperationResult.success("View updated successfully", output)


# ── Activities ───────────────────────────────────────────────────


async def create_or_set_activity(
    params: p.ActivityParams, ctx: OperationContext
) -> OperationResult:
    """Set an existing activity, or create one from a headline."""
    if params.activityId:
        await ctx.runner.run(["setactivity", params.activityId])
        return OperationResult(
            text=f"Activity {params.activityId} set successfully.",
        )
    if params.activityHeadline:
        output = await ctx.runner.run(["mkactivity", "-headline", params.activityHeadline])
        if params.setActivity:
            await ctx.runner.run(["setactivity", parse_activity_id(output)])
        return OperationResult.success("Activity created successfully", output)
    msg = "Either activityId or activityHeadline must be provided."
    raise OperationInputError(msg)


async def set_activity(
    params: p.SetActivityParams, ctx: OperationContext
) -> OperationResult:
    output = await ctx.runner.run(["setactivity", params.activityId])
    return OperationResult.success("Activity set", output)


async def list_activities(
    params: p.ListActivitiesParams, ctx: OperationContext
) -> OperationResult:
    args = ["lsactivity"]
    if params.currentOnly:
        args.append("-cact")
    output = await ctx.runner.run(args)
    return OperationResult.success("Activities", output)


# ── Checkout / checkin ───────────────────────────────────────────


async def checkout(params: p.CheckoutParams, ctx: OperationContext) -> OperationResult:
    comment = escape_comment(params.comment, ctx.comments.checkout)
    return await run_batch(
        ctx,
        params.resourcePaths,
        lambda path: ["checkout", "-c", comment, path],
        "Checkout results",
        "Error checking out resources",
    )


async def undo_checkout(
    params: p.UndoCheckoutParams, ctx: OperationContext
) -> OperationResult:
    mode = "-keep" if params.keepChanges else "-rm"
    return await run_batch(
        ctx,
        params.resourcePaths,
        lambda path: ["uncheckout", mode, path],
        "Undo checkout results",
        "Error undoing checkout",
    )


async def checkin(params: p.CheckinParams, ctx: OperationContext) -> OperationResult:
    comment = escape_comment(params.comment, ctx.comments.checkin)
    args = ["checkin"]
    if params.checkinIdentical:
        args.append("-identical")
    args.extend(["-c", comment])
    return await run_batch(
        ctx,
        params.resourcePaths,
        lambda path: [*args, path],
        "Check-in results",
        "Error checking in resources",
    )


async def list_checkouts(
    params: p.ListCheckoutsParams, ctx: OperationContext
) -> OperationResult:
    args = ["lscheckout", "-cview", "-short"]
    if params.path:
        args.append(params.path)
    output = await ctx.runner.run(args)
    return OperationResult.success("Checkouts", output)


# ── Session ──────────────────────────────────────────────────────


async def login(params: p.LoginParams, ctx: OperationContext) -> OperationResult:
    output = await ctx.runner.run(
        [
            "login",
            "-server",
            params.wanServer,
            "-user",
            params.username,
            "-password",
            params.password,
        ]
    )
    return OperationResult.success("Login successful", output)


async def logout(params: p.NoParams, ctx: OperationContext) -> OperationResult:
    output = await ctx.runner.run(["logout"])
    return OperationResult.success("Logout successful", output)


# ── Elements ─────────────────────────────────────────────────────


async def add_resources(
    params: p.AddResourcesParams, ctx: OperationContext
) -> OperationResult:
    comment = escape_comment(params.comment, ctx.comments.add)
    return await run_batch(
        ctx,
        params.resourcePaths,
        lambda path: ["mkelem", "-c", comment, path],
        "Add results",
        "Error adding resources",
    )


async def hijack(params: p.ResourcePathsParams, ctx: OperationContext) -> OperationResult:
    return await run_batch(
        ctx,
        params.resourcePaths,
        lambda path: ["hijack", path],
        "Hijack results",
        "Error hijacking resources",
    )


async def undo_hijack(
    params: p.ResourcePathsParams, ctx: OperationContext
) -> OperationResult:
    return await run_batch(
        ctx,
        params.resourcePaths,
        lambda path: ["unhijack", path],
        "Undo hijack results",
        "Error undoing hijack",
    )


async def rename_resource(
    params: p.RenameParams, ctx: OperationContext
) -> OperationResult:
    output = await ctx.runner.run(["mv", params.resourcePath, params.newName])
    return OperationResult.success("Resource renamed successfully", output)


async def remove_resource(
    params: p.ResourcePathParams, ctx: OperationContext
) -> OperationResult:
    output = await ctx.runner.run(["rmname", params.resourcePath])
    return OperationResult.success("Resource removed successfully", output)


# ── Queries ──────────────────────────────────────────────────────


async def resource_status(
    params: p.ResourcePathParams, ctx: OperationContext
) -> OperationResult:
    output = await ctx.runner.run(["describe", params.resourcePath])
    return OperationResult.success("Resource status", output)


async def open_file(params: p.FileParams, ctx: OperationContext) -> OperationResult:
    output = await ctx.runner.run(["describe", params.filePath])
    return OperationResult.success("File opened successfully", output)


async def resource_history(
    params: p.ResourcePathParams, ctx: OperationContext
) -> OperationResult:
    output = await ctx.runner.run(["lshistory", params.resourcePath])
    return OperationResult.success("Resource history", output)


async def version_tree(
    params: p.ResourcePathParams, ctx: OperationContext
) -> OperationResult:
    output = await ctx.runner.run(["lsvtree", params.resourcePath])
    return OperationResult.success("Version tree", output)


# ── Table ────────────────────────────────────────────────────────


OPERATIONS: tuple[Operation, ...] = (
    Operation(
        name="get_clearcase_views",
        description="Retrieve a list of available ClearCase views",
        params=p.NoParams,
        handler=get_views,
        error_label="Error retrieving views",
    ),
    Operation(
        name="get_resource_status",
        description="Retrieve the status of a specific resource",
        params=p.ResourcePathParams,
        handler=resource_status,
        error_label="Error retrieving resource status",
    ),
    Operation(
        name="create_or_set_ucm_activity",
        description="Create a new UCM activity or set an existing one",
        params=p.ActivityParams,
        handler=create_or_set_activity,
        error_label="Error creating or setting activity",
    ),
    Operation(
        name="checkout_resources",
        description="Checkout one or more resources for editing",
        params=p.CheckoutParams,
        handler=checkout,
        error_label="Error checking out resources",
    ),
    Operation(
        name="undo_checkout",
        description="Undo the checkout of one or more resources",
        params=p.UndoCheckoutParams,
        handler=undo_checkout,
        error_label="Error undoing checkout",
    ),
    Operation(
        name="checkin_resources",
        description="Check in one or more resources to ClearCase",
        params=p.CheckinParams,
        handler=checkin,
        error_label="Error checking in resources",
    ),
    Operation(
        name="login",
        description="Authenticate with ClearCase",
        params=p.LoginParams,
        handler=login,
        error_label="Error during login",
    ),
    Operation(
        name="logout",
        description="Logout from ClearCase",
        params=p.NoParams,
        handler=logout,
        error_label="Error during logout",
    ),
    Operation(
        name="add_view",
        description="Add a ClearCase view",
        params=p.ViewParams,
        handler=add_view,
        error_label="Error adding view",
    ),
    Operation(
        name="update_view",
        description="Update a ClearCase view",
        params=p.ViewParams,
        handler=update_view,
        error_label="Error updating view",
    ),
    Operation(
        name="add_resources",
        description="Add resources to ClearCase source control",
        params=p.AddResourcesParams,
        handler=add_resources,
        error_label="Error adding resources",
    ),
    Operation(
        name="hijack_resources",
        description="Hijack one or more resources",
        params=p.ResourcePathsParams,
        handler=hijack,
        error_label="Error hijacking resources",
    ),
    Operation(
        name="undo_hijack",
        description="Undo the hijack of one or more resources",
        params=p.ResourcePathsParams,
        handler=undo_hijack,
        error_label="Error undoing hijack",
    ),
    Operation(
        name="rename_resource",
        description="Rename a ClearCase resource",
        params=p.RenameParams,
        handler=rename_resource,
        error_label="Error renaming resource",
    ),
    Operation(
        name="remove_resource",
        description="Remove a ClearCase resource",
        params=p.ResourcePathParams,
        handler=remove_resource,
        error_label="Error removing resource",
    ),
    Operation(
        name="open_file",
        description="Open a ClearCase file",
        params=p.FileParams,
        handler=open_file,
        error_label="Error opening file",
    ),
    Operation(
        name="set_ucm_activity",
        description="Set an existing UCM activity in the current view",
        params=p.SetActivityParams,
        handler=set_activity,
        error_label="Error setting activity",
    ),
    Operation(
        name="list_ucm_activities",
        description="List UCM activities, or only the current one",
        params=p.ListActivitiesParams,
        handler=list_activities,
        error_label="Error listing activities",
    ),
    Operation(
        name="list_checkouts",
        description="List resources checked out in the current view",
        params=p.ListCheckoutsParams,
        handler=list_checkouts,
        error_label="Error listing checkouts",
    ),
    Operation(
        name="get_resource_history",
        description="Show the version history of a resource",
        params=p.ResourcePathParams,
        handler=resource_history,
        error_label="Error retrieving resource history",
    ),
    Operation(
        name="get_version_tree",
        description="Show the version tree of a resource",
        params=p.ResourcePathParams,
        handler=version_tree,
        error_label="Error retrieving version tree",
    ),
)


def build_registry(
    config: ClearCaseMcpConfig,
    runner: CleartoolRunner | None = None,
) -> OperationRegistry:
    """Create a registry holding every ClearCase tool."""
    context = OperationContext(
        runner=runner or CleartoolRunner(config.cleartool),
        comments=config.comments,
    )
    registry = OperationRegistry(context)
    for operation in OPERATIONS:
        registry.register(operation)
    return registry
