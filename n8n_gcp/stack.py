"""
Stack assembly.

Declares the five component groups as nodes of a ResourceGraph and builds
them in dependency order:

    services ─┬─> identity ─┐
              ├─> database ─┼─> secrets ─> cloud_run
              └─────────────┴──────────────┘

The configuration struct is built once at the entry point and passed in; no
component reads Pulumi configuration on its own.
"""

from dataclasses import dataclass

import structlog

from n8n_gcp.components.cloud_run import CloudRunServiceResources, create_cloud_run_service
from n8n_gcp.components.database import DatabaseResources, create_database
from n8n_gcp.components.project_services import ProjectServicesResources, enable_core_services
from n8n_gcp.components.secrets import SecretsResources, create_secrets
from n8n_gcp.components.service_account import ServiceAccountResources, create_service_account
from n8n_gcp.config.deployment import DeploymentConfig
from n8n_gcp.graph import NodeOutputs, ResourceGraph

logger = structlog.get_logger(__name__)

SERVICE_ACCOUNT_DISPLAY_NAME = "n8n Service Account for Cloud Run"


@dataclass(frozen=True)
class StackResources:
    services: ProjectServicesResources
    identity: ServiceAccountResources
    database: DatabaseResources
    secrets: SecretsResources
    cloud_run: CloudRunServiceResources


def declare_graph(config: DeploymentConfig) -> ResourceGraph:
    """Register every component builder and its prerequisites."""
    project = config.gcp.project
    region = config.gcp.region
    service_name = config.cloud_run.service_name

    def services(deps: NodeOutputs) -> ProjectServicesResources:
        return enable_core_services(project)

    def identity(deps: NodeOutputs) -> ServiceAccountResources:
        return create_service_account(
            project=project,
            account_id=config.cloud_run.service_account_name,
            display_name=SERVICE_ACCOUNT_DISPLAY_NAME,
            depends_on=[deps["services"].resource_manager_api],
        )

    def database(deps: NodeOutputs) -> DatabaseResources:
        return create_database(
            project=project,
            region=region,
            service_name=service_name,
            db_config=config.db,
            sql_admin_api=deps["services"].sql_admin_api,
        )

    def secrets(deps: NodeOutputs) -> SecretsResources:
        return create_secrets(
            project=project,
            service_name=service_name,
            db_password=deps["database"].password.result,
            service_account=deps["identity"].account,
            secret_manager_api=deps["services"].secret_manager_api,
        )

    def cloud_run(deps: NodeOutputs) -> CloudRunServiceResources:
        activation: ProjectServicesResources = deps["services"]
        identity_resources: ServiceAccountResources = deps["identity"]
        return create_cloud_run_service(
            project=project,
            region=region,
            timezone=config.timezone,
            cloud_run_config=config.cloud_run,
            db_config=config.db,
            db_instance=deps["database"].instance,
            service_account_email=identity_resources.account.email,
            secrets=deps["secrets"],
            allow_unauthenticated=config.allow_unauthenticated,
            dependencies=[*activation.all(), identity_resources.sql_client_role],
        )

    graph = ResourceGraph()
    graph.add("services", services)
    graph.add("identity", identity, depends_on=["services"])
    graph.add("database", database, depends_on=["services"])
    graph.add("secrets", secrets, depends_on=["services", "identity", "database"])
    graph.add("cloud_run", cloud_run, depends_on=["services", "identity", "database", "secrets"])
    return graph


def build_stack(config: DeploymentConfig) -> StackResources:
    """Validate the component graph, then declare every resource."""
    logger.info(
        "stack_build_started",
        project=config.gcp.project,
        region=config.gcp.region,
        service=config.cloud_run.service_name,
    )
    built = declare_graph(config).build()
    return StackResources(**built)
