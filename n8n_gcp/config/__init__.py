"""
Configuration Management.

- deployment: stack configuration consumed by the resource graph
- settings: environment-driven settings for the program's own diagnostics

Example:
    from n8n_gcp.config import load_deployment_config, get_settings
"""

from n8n_gcp.config.deployment import (
    PROVIDER_NAMESPACE,
    STACK_NAMESPACE,
    CloudRunConfig,
    ConfigSource,
    DatabaseConfig,
    DeploymentConfig,
    GcpConfig,
    load_deployment_config,
    require_bool,
    require_int,
    require_string,
)
from n8n_gcp.config.settings import RuntimeSettings, get_settings

__all__ = [
    "PROVIDER_NAMESPACE",
    "STACK_NAMESPACE",
    "CloudRunConfig",
    "ConfigSource",
    "DatabaseConfig",
    "DeploymentConfig",
    "GcpConfig",
    "RuntimeSettings",
    "get_settings",
    "load_deployment_config",
    "require_bool",
    "require_int",
    "require_string",
]
