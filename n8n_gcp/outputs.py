"""Stack outputs."""

from typing import Any, Callable

import pulumi

from n8n_gcp.stack import StackResources


def stack_outputs(stack: StackResources) -> dict[str, pulumi.Output[Any]]:
    """Export name -> deferred value."""
    return {
        "cloudRunServiceUrl": stack.cloud_run.service.uri,
        "cloudSqlConnectionName": stack.database.instance.connection_name,
        "n8nServiceAccountEmail": stack.identity.account.email,
    }


def export_outputs(
    stack: StackResources,
    export: Callable[[str, Any], None] = pulumi.export,
) -> None:
    for name, value in stack_outputs(stack).items():
        export(name, value)
