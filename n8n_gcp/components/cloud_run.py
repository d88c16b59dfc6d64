"""
Cloud Run v2 service running the n8n container.

The service reaches Cloud SQL over the unix socket mounted at /cloudsql,
reads the database password and encryption key from Secret Manager at
container start, scales to zero, and keeps its CPU allocated between
requests. Public invocation is granted only when allow_unauthenticated is set.
"""

from dataclasses import dataclass
from typing import Optional, Sequence

import pulumi
import pulumi_gcp as gcp
import structlog

from n8n_gcp.components.secrets import SecretsResources
from n8n_gcp.config.deployment import CloudRunConfig, DatabaseConfig

logger = structlog.get_logger(__name__)

N8N_IMAGE = "docker.io/n8nio/n8n:latest"
CLOUDSQL_VOLUME = "cloudsql"
CLOUDSQL_MOUNT_PATH = "/cloudsql"
INVOKER_ROLE = "roles/run.invoker"

# Startup probe tuned for slow n8n cold starts (migrations on first boot).
STARTUP_INITIAL_DELAY_SECONDS = 30
STARTUP_TIMEOUT_SECONDS = 240
STARTUP_PERIOD_SECONDS = 240
STARTUP_FAILURE_THRESHOLD = 3


@dataclass(frozen=True)
class CloudRunServiceResources:
    service: gcp.cloudrunv2.Service
    service_host: pulumi.Output[str]
    service_url: pulumi.Output[str]
    public_invoker: Optional[gcp.cloudrunv2.ServiceIamMember] = None


def service_host_for(service_name: str, project_number: pulumi.Input[str], region: str) -> pulumi.Output[str]:
    """Deterministic run.app hostname: <service>-<project number>.<region>.run.app."""
    return pulumi.Output.concat(service_name, "-", project_number, ".", region, ".run.app")


def _plain_env(name: str, value: pulumi.Input[str]) -> gcp.cloudrunv2.ServiceTemplateContainerEnvArgs:
    return gcp.cloudrunv2.ServiceTemplateContainerEnvArgs(name=name, value=value)


def _secret_env(name: str, secret_id: pulumi.Input[str]) -> gcp.cloudrunv2.ServiceTemplateContainerEnvArgs:
    return gcp.cloudrunv2.ServiceTemplateContainerEnvArgs(
        name=name,
        value_source=gcp.cloudrunv2.ServiceTemplateContainerEnvValueSourceArgs(
            secret_key_ref=gcp.cloudrunv2.ServiceTemplateContainerEnvValueSourceSecretKeyRefArgs(
                secret=secret_id,
                version="latest",
            ),
        ),
    )


def n8n_environment(
    cloud_run_config: CloudRunConfig,
    db_config: DatabaseConfig,
    timezone: str,
    connection_name: pulumi.Input[str],
    service_host: pulumi.Input[str],
    service_url: pulumi.Input[str],
    secrets: SecretsResources,
) -> list[gcp.cloudrunv2.ServiceTemplateContainerEnvArgs]:
    """Environment contract expected by the n8n image."""
    return [
        _plain_env("N8N_PORT", str(cloud_run_config.container_port)),
        _plain_env("N8N_PROTOCOL", "https"),
        _plain_env("DB_TYPE", "postgresdb"),
        _plain_env("DB_POSTGRESDB_DATABASE", db_config.name),
        _plain_env("DB_POSTGRESDB_USER", db_config.user),
        _plain_env("DB_POSTGRESDB_HOST", pulumi.Output.concat(CLOUDSQL_MOUNT_PATH, "/", connection_name)),
        _plain_env("DB_POSTGRESDB_PORT", "5432"),
        _plain_env("DB_POSTGRESDB_SCHEMA", "public"),
        _plain_env("N8N_USER_FOLDER", "/home/node/.n8n"),
        _plain_env("GENERIC_TIMEZONE", timezone),
        _plain_env("QUEUE_HEALTH_CHECK_ACTIVE", "true"),
        _plain_env("N8N_RUNNERS_ENABLED", "true"),
        _plain_env("N8N_PROXY_HOPS", "1"),
        _plain_env("N8N_HOST", service_host),
        _plain_env("WEBHOOK_URL", service_url),
        _plain_env("N8N_EDITOR_BASE_URL", service_url),
        _secret_env("DB_POSTGRESDB_PASSWORD", secrets.db_password_secret.secret_id),
        _secret_env("N8N_ENCRYPTION_KEY", secrets.encryption_key_secret.secret_id),
    ]


def service_dependencies(
    db_instance: gcp.sql.DatabaseInstance,
    secrets: SecretsResources,
    extra: Optional[Sequence[pulumi.Resource]] = None,
) -> list[pulumi.Resource]:
    """Everything that must exist before the service revision can start."""
    return [
        db_instance,
        *secrets.versions(),
        *secrets.accessors(),
        *(extra or []),
    ]


def create_cloud_run_service(
    project: str,
    region: str,
    timezone: str,
    cloud_run_config: CloudRunConfig,
    db_config: DatabaseConfig,
    db_instance: gcp.sql.DatabaseInstance,
    service_account_email: pulumi.Input[str],
    secrets: SecretsResources,
    allow_unauthenticated: bool,
    dependencies: Optional[Sequence[pulumi.Resource]] = None,
) -> CloudRunServiceResources:
    """
    Declare the n8n Cloud Run service and, optionally, its public invoker grant.

    Args:
        project: Target GCP project.
        region: Cloud Run location.
        timezone: Value for GENERIC_TIMEZONE.
        cloud_run_config: Service sizing and naming.
        db_config: Database name and user passed to n8n.
        db_instance: Cloud SQL instance whose socket is mounted.
        service_account_email: Identity the revision runs as.
        secrets: Password and encryption key secrets.
        allow_unauthenticated: Grant roles/run.invoker to allUsers.
        dependencies: Additional prerequisites such as activation tokens and
            the Cloud SQL client grant.

    Returns:
        CloudRunServiceResources with the service, derived host and URL, and
        the public invoker grant when one was declared.
    """
    # Project number is an external read, resolved by the engine.
    project_number = gcp.organizations.get_project_output(project_id=project).apply(
        lambda details: details.number
    )
    service_host = service_host_for(cloud_run_config.service_name, project_number, region)
    service_url = pulumi.Output.concat("https://", service_host)

    port = cloud_run_config.container_port

    service = gcp.cloudrunv2.Service(
        "n8nService",
        name=cloud_run_config.service_name,
        project=project,
        location=region,
        ingress="INGRESS_TRAFFIC_ALL",
        deletion_protection=False,
        template=gcp.cloudrunv2.ServiceTemplateArgs(
            service_account=service_account_email,
            scaling=gcp.cloudrunv2.ServiceTemplateScalingArgs(
                max_instance_count=cloud_run_config.max_instances,
                min_instance_count=0,
            ),
            volumes=[
                gcp.cloudrunv2.ServiceTemplateVolumeArgs(
                    name=CLOUDSQL_VOLUME,
                    cloud_sql_instance=gcp.cloudrunv2.ServiceTemplateVolumeCloudSqlInstanceArgs(
                        instances=[db_instance.connection_name],
                    ),
                ),
            ],
            containers=[
                gcp.cloudrunv2.ServiceTemplateContainerArgs(
                    image=N8N_IMAGE,
                    volume_mounts=[
                        gcp.cloudrunv2.ServiceTemplateContainerVolumeMountArgs(
                            name=CLOUDSQL_VOLUME,
                            mount_path=CLOUDSQL_MOUNT_PATH,
                        ),
                    ],
                    ports=gcp.cloudrunv2.ServiceTemplateContainerPortsArgs(
                        container_port=port,
                    ),
                    resources=gcp.cloudrunv2.ServiceTemplateContainerResourcesArgs(
                        limits={
                            "cpu": cloud_run_config.cpu,
                            "memory": cloud_run_config.memory,
                        },
                        startup_cpu_boost=True,
                        cpu_idle=False,
                    ),
                    envs=n8n_environment(
                        cloud_run_config,
                        db_config,
                        timezone,
                        db_instance.connection_name,
                        service_host,
                        service_url,
                        secrets,
                    ),
                    startup_probe=gcp.cloudrunv2.ServiceTemplateContainerStartupProbeArgs(
                        initial_delay_seconds=STARTUP_INITIAL_DELAY_SECONDS,
                        timeout_seconds=STARTUP_TIMEOUT_SECONDS,
                        period_seconds=STARTUP_PERIOD_SECONDS,
                        failure_threshold=STARTUP_FAILURE_THRESHOLD,
                        tcp_socket=gcp.cloudrunv2.ServiceTemplateContainerStartupProbeTcpSocketArgs(
                            port=port,
                        ),
                    ),
                ),
            ],
        ),
        traffics=[
            gcp.cloudrunv2.ServiceTrafficArgs(
                type="TRAFFIC_TARGET_ALLOCATION_TYPE_LATEST",
                percent=100,
            ),
        ],
        opts=pulumi.ResourceOptions(
            depends_on=service_dependencies(db_instance, secrets, dependencies),
        ),
    )
    logger.info(
        "cloud_run_service_declared",
        service=cloud_run_config.service_name,
        region=region,
        cpu=cloud_run_config.cpu,
        memory=cloud_run_config.memory,
        max_instances=cloud_run_config.max_instances,
    )

    public_invoker = None
    if allow_unauthenticated:
        public_invoker = gcp.cloudrunv2.ServiceIamMember(
            "n8nPublicInvoker",
            project=project,
            location=service.location,
            name=service.name,
            role=INVOKER_ROLE,
            member="allUsers",
            opts=pulumi.ResourceOptions(depends_on=[service]),
        )
        logger.info("public_invoker_declared", service=cloud_run_config.service_name)
    else:
        logger.info("public_invoker_skipped", service=cloud_run_config.service_name)

    return CloudRunServiceResources(
        service=service,
        service_host=service_host,
        service_url=service_url,
        public_invoker=public_invoker,
    )
