"""
Deployment Configuration.

Loads and validates every parameter the resource graph consumes from Pulumi
stack configuration. All keys are required and there are no silent defaults:
a missing or empty value raises MissingConfigurationError before a single
resource is declared, so a partial graph is never submitted.

Keys:
    gcp:project, gcp:region
    n8n-self-host-on-gcp:dbName, dbUser, dbTier, dbVersion, dbStorageSize
    n8n-self-host-on-gcp:cloudRunServiceName, serviceAccountName,
        cloudRunCpu, cloudRunMemory, cloudRunMaxInstances,
        cloudRunContainerPort
    n8n-self-host-on-gcp:genericTimezone, allowUnauthenticated

Example:
    import pulumi

    config = load_deployment_config(
        pulumi.Config(STACK_NAMESPACE),
        pulumi.Config(PROVIDER_NAMESPACE),
    )
"""

from typing import Optional, Protocol

import pulumi
from pydantic import BaseModel, ConfigDict, Field, ValidationError

from n8n_gcp.core.exceptions import InvalidConfigurationError, MissingConfigurationError

STACK_NAMESPACE = "n8n-self-host-on-gcp"
PROVIDER_NAMESPACE = "gcp"


class ConfigSource(Protocol):
    """The subset of pulumi.Config the loader reads from."""

    name: str

    def get(self, key: str) -> Optional[str]: ...

    def get_int(self, key: str) -> Optional[int]: ...

    def get_bool(self, key: str) -> Optional[bool]: ...


# =============================================================================
# Models
# =============================================================================


class GcpConfig(BaseModel):
    """Target project and region."""

    model_config = ConfigDict(frozen=True)

    project: str
    region: str


class DatabaseConfig(BaseModel):
    """Cloud SQL engine and logical database parameters."""

    model_config = ConfigDict(frozen=True)

    name: str
    user: str
    tier: str = Field(..., description="Machine tier, e.g. db-f1-micro")
    version: str = Field(..., description="Engine version, e.g. POSTGRES_15")
    storage_size: int = Field(..., description="Disk size in GB")


class CloudRunConfig(BaseModel):
    """Cloud Run service sizing and naming."""

    model_config = ConfigDict(frozen=True)

    service_name: str
    service_account_name: str
    cpu: str
    memory: str
    max_instances: int
    container_port: int = Field(..., gt=0, le=65535)


class DeploymentConfig(BaseModel):
    """Everything the resource graph needs, built once at the entry point."""

    model_config = ConfigDict(frozen=True)

    gcp: GcpConfig
    db: DatabaseConfig
    cloud_run: CloudRunConfig
    timezone: str
    allow_unauthenticated: bool


# =============================================================================
# Required-key helpers
# =============================================================================


def require_string(config: ConfigSource, key: str) -> str:
    """Return the trimmed value of a string key, rejecting absent or blank values."""
    value = config.get(key)
    value = value.strip() if value is not None else ""
    if not value:
        raise MissingConfigurationError(
            f"Set {config.name}:{key} via Pulumi config.",
            config_key=f"{config.name}:{key}",
        )
    return value


def require_int(config: ConfigSource, key: str) -> int:
    """Return an integer key. A present 0 is a value, not a missing key."""
    try:
        value = config.get_int(key)
    except (pulumi.ConfigTypeError, ValueError) as e:
        raise InvalidConfigurationError(str(e), config_key=f"{config.name}:{key}") from e
    if value is None:
        raise MissingConfigurationError(
            f"Set numeric config {config.name}:{key}.",
            config_key=f"{config.name}:{key}",
        )
    return value


def require_bool(config: ConfigSource, key: str) -> bool:
    """Return a boolean key. A present false is a value, not a missing key."""
    try:
        value = config.get_bool(key)
    except (pulumi.ConfigTypeError, ValueError) as e:
        raise InvalidConfigurationError(str(e), config_key=f"{config.name}:{key}") from e
    if value is None:
        raise MissingConfigurationError(
            f"Set boolean config {config.name}:{key}.",
            config_key=f"{config.name}:{key}",
        )
    return value


# =============================================================================
# Loader
# =============================================================================


def load_deployment_config(
    stack_config: ConfigSource,
    provider_config: ConfigSource,
) -> DeploymentConfig:
    """
    Read and validate the full deployment configuration.

    Args:
        stack_config: Source for the n8n-self-host-on-gcp namespace.
        provider_config: Source for the gcp provider namespace.

    Returns:
        Frozen DeploymentConfig.

    Raises:
        MissingConfigurationError: A required key is absent or empty.
        InvalidConfigurationError: A key is present but malformed or out of range.
    """
    raw = {
        "gcp": {
            "project": require_string(provider_config, "project"),
            "region": require_string(provider_config, "region"),
        },
        "db": {
            "name": require_string(stack_config, "dbName"),
            "user": require_string(stack_config, "dbUser"),
            "tier": require_string(stack_config, "dbTier"),
            "version": require_string(stack_config, "dbVersion"),
            "storage_size": require_int(stack_config, "dbStorageSize"),
        },
        "cloud_run": {
            "service_name": require_string(stack_config, "cloudRunServiceName"),
            "service_account_name": require_string(stack_config, "serviceAccountName"),
            "cpu": require_string(stack_config, "cloudRunCpu"),
            "memory": require_string(stack_config, "cloudRunMemory"),
            "max_instances": require_int(stack_config, "cloudRunMaxInstances"),
            "container_port": require_int(stack_config, "cloudRunContainerPort"),
        },
        "timezone": require_string(stack_config, "genericTimezone"),
        "allow_unauthenticated": require_bool(stack_config, "allowUnauthenticated"),
    }

    try:
        return DeploymentConfig.model_validate(raw)
    except ValidationError as e:
        first = e.errors()[0]
        location = ".".join(str(part) for part in first["loc"])
        raise InvalidConfigurationError(
            f"Invalid deployment configuration: {location}: {first['msg']}",
            config_key=location,
        ) from e
