"""Dedicated service identity for the Cloud Run service."""

from dataclasses import dataclass
from typing import Optional, Sequence

import pulumi
import pulumi_gcp as gcp
import structlog

logger = structlog.get_logger(__name__)

SQL_CLIENT_ROLE = "roles/cloudsql.client"


@dataclass(frozen=True)
class ServiceAccountResources:
    account: gcp.serviceaccount.Account
    sql_client_role: gcp.projects.IAMMember


def service_account_member(account: gcp.serviceaccount.Account) -> pulumi.Output[str]:
    """IAM member expression for the account, resolved from its provider-assigned email."""
    return pulumi.Output.concat("serviceAccount:", account.email)


def create_service_account(
    project: str,
    account_id: str,
    display_name: str,
    depends_on: Optional[Sequence[pulumi.Resource]] = None,
) -> ServiceAccountResources:
    """
    Create the service account and grant it the Cloud SQL client role.

    Args:
        project: Target GCP project.
        account_id: Account id (the part before @ in the email).
        display_name: Human-readable account name.
        depends_on: Prerequisites for the account, typically the
            Resource Manager activation token.

    Returns:
        ServiceAccountResources with the account and its project role grant.
    """
    account = gcp.serviceaccount.Account(
        "n8nServiceAccount",
        project=project,
        account_id=account_id,
        display_name=display_name,
        opts=pulumi.ResourceOptions(depends_on=list(depends_on)) if depends_on else None,
    )

    sql_client_role = gcp.projects.IAMMember(
        "sqlClientRole",
        project=project,
        role=SQL_CLIENT_ROLE,
        member=service_account_member(account),
        opts=pulumi.ResourceOptions(depends_on=[account]),
    )

    logger.info("service_account_declared", project=project, account_id=account_id)
    return ServiceAccountResources(account=account, sql_client_role=sql_client_role)
