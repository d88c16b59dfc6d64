"""
Core exception hierarchy for the n8n deployment.

Every failure raised by this program is fatal: configuration and graph
errors abort the Pulumi run before any resource is registered. Provider
refusals are reported by the Pulumi engine itself and are not wrapped here.
"""

from typing import Any, Optional


# =============================================================================
# Base Exceptions
# =============================================================================


class DeploymentError(Exception):
    """Base exception for all deployment errors."""

    def __init__(self, message: str, details: Optional[dict[str, Any]] = None):
        self.message = message
        self.details = details or {}
        super().__init__(message)

    def __str__(self) -> str:
        if self.details:
            return f"{self.message} | Details: {self.details}"
        return self.message


# =============================================================================
# Configuration Errors
# =============================================================================


class ConfigurationError(DeploymentError):
    """Raised when configuration is invalid or missing."""

    def __init__(self, message: str, config_key: Optional[str] = None):
        self.config_key = config_key
        super().__init__(message)


class MissingConfigurationError(ConfigurationError):
    """Raised when a required configuration key is absent or empty."""

    pass


class InvalidConfigurationError(ConfigurationError):
    """Raised when a configuration key is present but cannot be used."""

    pass


# =============================================================================
# Resource Graph Errors
# =============================================================================


class GraphError(DeploymentError):
    """Base exception for resource graph construction errors."""

    pass


class DependencyCycleError(GraphError):
    """Raised when the declared dependency edges do not form a DAG."""

    def __init__(self, cycle: list[str]):
        self.cycle = cycle
        super().__init__(
            "Resource graph contains a dependency cycle",
            {"cycle": " -> ".join(cycle)},
        )


class DependencyOrderingError(GraphError):
    """
    Raised when a node reads, or declares, a dependency the graph cannot honour.

    Examples: a prerequisite that was never declared, a node declared twice,
    or a builder reading the output of a node outside its declared
    prerequisites.
    """

    def __init__(self, node: str, message: str):
        self.node = node
        super().__init__(f"[{node}] {message}")
