"""Provider API activation for the target project."""

from dataclasses import dataclass

import pulumi_gcp as gcp
import structlog

logger = structlog.get_logger(__name__)

RUN_API = "run.googleapis.com"
SQL_ADMIN_API = "sqladmin.googleapis.com"
SECRET_MANAGER_API = "secretmanager.googleapis.com"
RESOURCE_MANAGER_API = "cloudresourcemanager.googleapis.com"


@dataclass(frozen=True)
class ProjectServicesResources:
    """Activation tokens, one per enabled API."""

    run_api: gcp.projects.Service
    sql_admin_api: gcp.projects.Service
    secret_manager_api: gcp.projects.Service
    resource_manager_api: gcp.projects.Service

    def all(self) -> list[gcp.projects.Service]:
        return [self.run_api, self.sql_admin_api, self.secret_manager_api, self.resource_manager_api]


def _enable(resource_name: str, project: str, service: str) -> gcp.projects.Service:
    # Other deployments in the project may rely on the API, so teardown leaves it enabled.
    return gcp.projects.Service(
        resource_name,
        project=project,
        service=service,
        disable_on_destroy=False,
    )


def enable_core_services(project: str) -> ProjectServicesResources:
    """Enable the Cloud Run, Cloud SQL Admin, Secret Manager and Resource Manager APIs."""
    resources = ProjectServicesResources(
        run_api=_enable("runApi", project, RUN_API),
        sql_admin_api=_enable("sqlAdminApi", project, SQL_ADMIN_API),
        secret_manager_api=_enable("secretManagerApi", project, SECRET_MANAGER_API),
        resource_manager_api=_enable("resourceManagerApi", project, RESOURCE_MANAGER_API),
    )
    logger.info(
        "core_services_declared",
        project=project,
        services=[RUN_API, SQL_ADMIN_API, SECRET_MANAGER_API, RESOURCE_MANAGER_API],
    )
    return resources
