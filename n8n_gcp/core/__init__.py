"""
Core building blocks shared by every component.

- exceptions: fatal error hierarchy (configuration and graph errors)
- logging: structlog configuration for the Pulumi program
"""

from n8n_gcp.core.exceptions import (
    ConfigurationError,
    DependencyCycleError,
    DependencyOrderingError,
    DeploymentError,
    GraphError,
    InvalidConfigurationError,
    MissingConfigurationError,
)

__all__ = [
    "ConfigurationError",
    "DependencyCycleError",
    "DependencyOrderingError",
    "DeploymentError",
    "GraphError",
    "InvalidConfigurationError",
    "MissingConfigurationError",
]
