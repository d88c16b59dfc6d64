"""
Cloud SQL instance, logical database and credentialed user.

The instance is sized for a single small n8n deployment: zonal, HDD storage,
no automated backups and no deletion protection, so a stack can be torn down
in one step. The user's password is generated by pulumi-random and is only
regenerated when its keepers change (instance name or user name), which is
how a credential rotation is triggered.
"""

from dataclasses import dataclass

import pulumi
import pulumi_gcp as gcp
import pulumi_random as random
import structlog

from n8n_gcp.config.deployment import DatabaseConfig

logger = structlog.get_logger(__name__)

PASSWORD_LENGTH = 16


@dataclass(frozen=True)
class DatabaseResources:
    password: random.RandomPassword
    instance: gcp.sql.DatabaseInstance
    database: gcp.sql.Database
    user: gcp.sql.User


def instance_name_for(service_name: str) -> str:
    return f"{service_name}-db"


def password_keepers(instance_name: str, user: str) -> dict[str, str]:
    """Values that, when changed, force a new database password."""
    return {
        "dbInstance": instance_name,
        "dbUser": user,
    }


def create_database(
    project: str,
    region: str,
    service_name: str,
    db_config: DatabaseConfig,
    sql_admin_api: gcp.projects.Service,
) -> DatabaseResources:
    """
    Declare the password, instance, database and user.

    Tier and engine version are passed through untouched; Cloud SQL rejects
    values it does not recognise when the instance is created.
    """
    instance_name = instance_name_for(service_name)

    password = random.RandomPassword(
        "dbPassword",
        length=PASSWORD_LENGTH,
        special=True,
        min_upper=1,
        min_lower=1,
        min_numeric=1,
        min_special=1,
        keepers=password_keepers(instance_name, db_config.user),
    )

    instance = gcp.sql.DatabaseInstance(
        "n8nDbInstance",
        name=instance_name,
        project=project,
        region=region,
        database_version=db_config.version,
        settings=gcp.sql.DatabaseInstanceSettingsArgs(
            tier=db_config.tier,
            availability_type="ZONAL",
            disk_type="PD_HDD",
            disk_size=db_config.storage_size,
            backup_configuration=gcp.sql.DatabaseInstanceSettingsBackupConfigurationArgs(
                enabled=False,
            ),
        ),
        deletion_protection=False,
        opts=pulumi.ResourceOptions(depends_on=[sql_admin_api]),
    )

    database = gcp.sql.Database(
        "n8nDatabase",
        name=db_config.name,
        instance=instance.name,
        project=project,
    )

    user = gcp.sql.User(
        "n8nUser",
        name=db_config.user,
        instance=instance.name,
        password=password.result,
        project=project,
    )

    logger.info(
        "database_declared",
        instance=instance_name,
        region=region,
        tier=db_config.tier,
        version=db_config.version,
        storage_gb=db_config.storage_size,
    )
    return DatabaseResources(password=password, instance=instance, database=database, user=user)
