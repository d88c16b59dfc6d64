"""
Resource components, leaves first.

- project_services: provider API activation tokens
- service_account: service identity and Cloud SQL client grant
- database: Cloud SQL instance, database, user and generated password
- secrets: Secret Manager containers, versions and accessor grants
- cloud_run: the n8n Cloud Run service and optional public invoker
"""

from n8n_gcp.components.cloud_run import CloudRunServiceResources, create_cloud_run_service
from n8n_gcp.components.database import DatabaseResources, create_database
from n8n_gcp.components.project_services import ProjectServicesResources, enable_core_services
from n8n_gcp.components.secrets import SecretsResources, create_secrets
from n8n_gcp.components.service_account import ServiceAccountResources, create_service_account

__all__ = [
    "CloudRunServiceResources",
    "DatabaseResources",
    "ProjectServicesResources",
    "SecretsResources",
    "ServiceAccountResources",
    "create_cloud_run_service",
    "create_database",
    "create_secrets",
    "create_service_account",
    "enable_core_services",
]
