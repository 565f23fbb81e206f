"""Commits tools.

Changes to workflows, templates and other resources are made in the
development environment and become live once committed and promoted.
"""

from typing import Any

from knock_tools.base import ToolDescriptor
from knock_tools.catalog.schemas import (
    CommitAllChangesInput,
    ListCommitsInput,
    PromoteAllCommitsInput,
)


def _list_commits(client, config):
    async def run(ctx: dict[str, Any], params: ListCommitsInput) -> dict[str, Any]:
        return await client.list_commits(
            config.resolve_environment(params.environment), params.promoted
        )

    return run


def _commit_all_changes(client, config):
    async def run(ctx: dict[str, Any], params: CommitAllChangesInput) -> dict[str, Any]:
        return await client.commit_all(
            config.resolve_environment(params.environment), params.message
        )

    return run


def _promote_all_commits(client, config):
    async def run(ctx: dict[str, Any], params: PromoteAllCommitsInput) -> dict[str, Any]:
        return await client.promote_all(params.to_environment)

    return run


list_commits = ToolDescriptor(
    method="list_commits",
    name="List commits",
    description="""
    Returns all commits available in the environment. Use this tool when you are
    asked to see what changes are available to be deployed.
    """,
    parameters=ListCommitsInput,
    execute=_list_commits,
)

commit_all_changes = ToolDescriptor(
    method="commit_all_changes",
    name="Commit all changes",
    description="""
    Commit all pending changes. This can only be used in the development environment.
    """,
    parameters=CommitAllChangesInput,
    execute=_commit_all_changes,
)

promote_all_commits = ToolDescriptor(
    method="promote_all_commits",
    name="Promote all commits",
    description="""
    Promote all commits to the next environment. Use this tool when you are asked to
    deploy all changes.
    """,
    parameters=PromoteAllCommitsInput,
    execute=_promote_all_commits,
)

TOOLS = [list_commits, commit_all_changes, promote_all_commits]

PERMISSIONS = {
    "read": ["list_commits"],
    "manage": ["commit_all_changes", "promote_all_commits"],
}
