"""
Secret Manager containers for the database password and n8n encryption key.

Both secrets use automatic replication, hold exactly one version whose
payload is the generated value, and are readable by the service account.
Plaintext never appears in the Cloud Run template: the service resolves the
"latest" version at container start.
"""

from dataclasses import dataclass

import pulumi
import pulumi_gcp as gcp
import pulumi_random as random
import structlog

from n8n_gcp.components.service_account import service_account_member

logger = structlog.get_logger(__name__)

SECRET_ACCESSOR_ROLE = "roles/secretmanager.secretAccessor"
ENCRYPTION_KEY_LENGTH = 32


@dataclass(frozen=True)
class SecretsResources:
    db_password_secret: gcp.secretmanager.Secret
    db_password_secret_version: gcp.secretmanager.SecretVersion
    encryption_key: random.RandomPassword
    encryption_key_secret: gcp.secretmanager.Secret
    encryption_key_secret_version: gcp.secretmanager.SecretVersion
    db_password_secret_accessor: gcp.secretmanager.SecretIamMember
    encryption_key_secret_accessor: gcp.secretmanager.SecretIamMember

    def versions(self) -> list[gcp.secretmanager.SecretVersion]:
        return [self.db_password_secret_version, self.encryption_key_secret_version]

    def accessors(self) -> list[gcp.secretmanager.SecretIamMember]:
        return [self.db_password_secret_accessor, self.encryption_key_secret_accessor]


def _secret(
    resource_name: str,
    project: str,
    secret_id: str,
    secret_manager_api: gcp.projects.Service,
) -> gcp.secretmanager.Secret:
    return gcp.secretmanager.Secret(
        resource_name,
        project=project,
        secret_id=secret_id,
        replication=gcp.secretmanager.SecretReplicationArgs(
            auto=gcp.secretmanager.SecretReplicationAutoArgs(),
        ),
        opts=pulumi.ResourceOptions(depends_on=[secret_manager_api]),
    )


def _accessor(
    resource_name: str,
    secret: gcp.secretmanager.Secret,
    service_account: gcp.serviceaccount.Account,
) -> gcp.secretmanager.SecretIamMember:
    return gcp.secretmanager.SecretIamMember(
        resource_name,
        project=secret.project,
        secret_id=secret.secret_id,
        role=SECRET_ACCESSOR_ROLE,
        member=service_account_member(service_account),
        opts=pulumi.ResourceOptions(depends_on=[secret, service_account]),
    )


def create_secrets(
    project: str,
    service_name: str,
    db_password: pulumi.Input[str],
    service_account: gcp.serviceaccount.Account,
    secret_manager_api: gcp.projects.Service,
) -> SecretsResources:
    """
    Declare both secrets, their versions and accessor grants.

    Args:
        project: Target GCP project.
        service_name: Prefix for the secret ids.
        db_password: Generated database password (a deferred value).
        service_account: Identity that is granted read access.
        secret_manager_api: Secret Manager activation token.
    """
    db_password_secret = _secret(
        "dbPasswordSecret", project, f"{service_name}-db-password", secret_manager_api
    )
    db_password_secret_version = gcp.secretmanager.SecretVersion(
        "dbPasswordSecretVersion",
        secret=db_password_secret.id,
        secret_data=db_password,
    )

    encryption_key = random.RandomPassword(
        "n8nEncryptionKey",
        length=ENCRYPTION_KEY_LENGTH,
        special=False,
    )
    encryption_key_secret = _secret(
        "encryptionKeySecret", project, f"{service_name}-encryption-key", secret_manager_api
    )
    encryption_key_secret_version = gcp.secretmanager.SecretVersion(
        "encryptionKeySecretVersion",
        secret=encryption_key_secret.id,
        secret_data=encryption_key.result,
    )

    resources = SecretsResources(
        db_password_secret=db_password_secret,
        db_password_secret_version=db_password_secret_version,
        encryption_key=encryption_key,
        encryption_key_secret=encryption_key_secret,
        encryption_key_secret_version=encryption_key_secret_version,
        db_password_secret_accessor=_accessor(
            "dbPasswordSecretAccessor", db_password_secret, service_account
        ),
        encryption_key_secret_accessor=_accessor(
            "encryptionKeySecretAccessor", encryption_key_secret, service_account
        ),
    )

    logger.info(
        "secrets_declared",
        project=project,
        secret_ids=[f"{service_name}-db-password", f"{service_name}-encryption-key"],
    )
    return resources
