"""Tenants tools."""

from typing import Any

from knock_tools.base import ToolDescriptor
from knock_tools.catalog.schemas import SetTenantInput, TenantInput


def _get_tenant(client, config):
    async def run(ctx: dict[str, Any], params: TenantInput) -> dict[str, Any]:
        public = await client.public_api(config.resolve_environment(params.environment))
        return await public.get_tenant(params.tenant_id)

    return run


def _set_tenant(client, config):
    async def run(ctx: dict[str, Any], params: SetTenantInput) -> dict[str, Any]:
        public = await client.public_api(config.resolve_environment(params.environment))
        return await public.set_tenant(
            params.tenant_id, {"name": params.name, **(params.properties or {})}
        )

    return run


def _delete_tenant(client, config):
    async def run(ctx: dict[str, Any], params: TenantInput) -> dict[str, Any]:
        public = await client.public_api(config.resolve_environment(params.environment))
        await public.delete_tenant(params.tenant_id)
        return {"deleted": True, "tenant_id": params.tenant_id}

    return run


get_tenant = ToolDescriptor(
    method="get_tenant",
    name="Get tenant",
    description="""
    Retrieves a tenant by its ID, including its name and any custom properties.
    Use this tool when you need to inspect the tenant a user or workflow belongs to.
    """,
    parameters=TenantInput,
    execute=_get_tenant,
)

set_tenant = ToolDescriptor(
    method="set_tenant",
    name="Set tenant",
    description="""
    Creates or updates a tenant. Use this tool to set the name or custom properties
    of a tenant.
    """,
    parameters=SetTenantInput,
    execute=_set_tenant,
)

delete_tenant = ToolDescriptor(
    method="delete_tenant",
    name="Delete tenant",
    description="Deletes a tenant by its ID. This cannot be undone.",
    parameters=TenantInput,
    execute=_delete_tenant,
)

TOOLS = [get_tenant, set_tenant, delete_tenant]

PERMISSIONS = {
    "read": ["get_tenant"],
    "manage": ["set_tenant", "delete_tenant"],
}
