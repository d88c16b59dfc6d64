"""
n8n on GCP - Pulumi Entry Point

Loads stack configuration, declares the resource graph and exports the
service URL, Cloud SQL connection name and service account email.
"""

import pulumi
import structlog

from n8n_gcp.config import (
    PROVIDER_NAMESPACE,
    STACK_NAMESPACE,
    get_settings,
    load_deployment_config,
)
from n8n_gcp.core.logging import configure_logging
from n8n_gcp.outputs import export_outputs
from n8n_gcp.stack import build_stack

configure_logging(get_settings())
logger = structlog.get_logger(__name__)

# Fails before any resource is declared if a key is missing.
config = load_deployment_config(
    pulumi.Config(STACK_NAMESPACE),
    pulumi.Config(PROVIDER_NAMESPACE),
)

stack = build_stack(config)
export_outputs(stack)

logger.info("stack_declared", stack=pulumi.get_stack(), project=config.gcp.project)
