"""
Pytest Configuration and Shared Fixtures.

- mocks: Pulumi mock runtime that records every registered resource
- deployment_config: a complete, valid DeploymentConfig
- declared_dependencies: resource name -> depends_on given at construction
- FakeConfig: in-memory stand-in for pulumi.Config
"""

from typing import Any, Optional

import pulumi
import pytest

from n8n_gcp.config.deployment import (
    CloudRunConfig,
    DatabaseConfig,
    DeploymentConfig,
    GcpConfig,
)

TEST_PROJECT = "test-project"
TEST_REGION = "us-central1"
PROJECT_NUMBER = "1234567890"


class RecordingMocks(pulumi.runtime.Mocks):
    """Pulumi mocks that keep every resource registration for inspection."""

    def __init__(self) -> None:
        self.resources: list[pulumi.runtime.MockResourceArgs] = []
        self.calls: list[pulumi.runtime.MockCallArgs] = []

    def new_resource(self, args: pulumi.runtime.MockResourceArgs):
        self.resources.append(args)
        state: dict[str, Any] = dict(args.inputs)

        if args.typ == "random:index/randomPassword:RandomPassword":
            state["result"] = f"mock-{args.name}"
        elif args.typ == "gcp:serviceaccount/account:Account":
            state["email"] = f"{args.inputs['accountId']}@{TEST_PROJECT}.iam.gserviceaccount.com"
        elif args.typ == "gcp:sql/databaseInstance:DatabaseInstance":
            state["connectionName"] = f"{TEST_PROJECT}:{TEST_REGION}:{args.inputs['name']}"
        elif args.typ == "gcp:cloudrunv2/service:Service":
            state["uri"] = f"https://{args.inputs['name']}-abc123-uc.a.run.app"

        return [f"{args.name}-id", state]

    def call(self, args: pulumi.runtime.MockCallArgs):
        self.calls.append(args)
        if args.token == "gcp:organizations/getProject:getProject":
            return {"number": PROJECT_NUMBER, "projectId": TEST_PROJECT}
        return {}

    def of_type(self, typ: str) -> list[pulumi.runtime.MockResourceArgs]:
        return [res for res in self.resources if res.typ == typ]

    def named(self, name: str) -> pulumi.runtime.MockResourceArgs:
        matches = [res for res in self.resources if res.name == name]
        assert matches, f"resource {name} was not registered"
        return matches[0]


class FakeConfig:
    """Dictionary-backed object with the pulumi.Config read interface."""

    def __init__(self, name: str, values: Optional[dict[str, Any]] = None):
        self.name = name
        self.values = dict(values or {})

    def get(self, key: str) -> Optional[str]:
        value = self.values.get(key)
        return None if value is None else str(value)

    def get_int(self, key: str) -> Optional[int]:
        value = self.get(key)
        if value is None:
            return None
        try:
            return int(value)
        except ValueError:
            raise pulumi.ConfigTypeError(f"{self.name}:{key}", value, "int")

    def get_bool(self, key: str) -> Optional[bool]:
        value = self.get(key)
        if value is None:
            return None
        if value in ("true", "True"):
            return True
        if value in ("false", "False"):
            return False
        raise pulumi.ConfigTypeError(f"{self.name}:{key}", value, "bool")


@pytest.fixture
def mocks() -> RecordingMocks:
    """Fresh Pulumi mock runtime for each test."""
    recorder = RecordingMocks()
    pulumi.runtime.set_mocks(recorder, project="n8n-self-host-on-gcp", stack="test", preview=False)
    return recorder


@pytest.fixture
def declared_dependencies(monkeypatch) -> dict[str, list[pulumi.Resource]]:
    """
    Record the explicit depends_on of every custom resource as it is constructed.

    The mock runtime only sees resolved inputs, so ordering edges are captured
    from the resource options before registration.
    """
    recorded: dict[str, list[pulumi.Resource]] = {}
    original_init = pulumi.CustomResource.__init__

    def recording_init(self, t, name, props=None, opts=None, *args, **kwargs):
        depends_on = opts.depends_on if opts is not None else None
        recorded[name] = list(depends_on or [])
        original_init(self, t, name, props, opts, *args, **kwargs)

    monkeypatch.setattr(pulumi.CustomResource, "__init__", recording_init)
    return recorded


@pytest.fixture
def stack_values() -> dict[str, Any]:
    """Valid values for the n8n-self-host-on-gcp namespace."""
    return {
        "dbName": "n8n",
        "dbUser": "n8n-user",
        "dbTier": "db-f1-micro",
        "dbVersion": "POSTGRES_15",
        "dbStorageSize": "10",
        "cloudRunServiceName": "n8n",
        "serviceAccountName": "n8n-service-account",
        "cloudRunCpu": "1",
        "cloudRunMemory": "2Gi",
        "cloudRunMaxInstances": "1",
        "cloudRunContainerPort": "5678",
        "genericTimezone": "UTC",
        "allowUnauthenticated": "true",
    }


@pytest.fixture
def provider_values() -> dict[str, Any]:
    """Valid values for the gcp namespace."""
    return {"project": TEST_PROJECT, "region": TEST_REGION}


@pytest.fixture
def db_config() -> DatabaseConfig:
    return DatabaseConfig(
        name="n8n",
        user="n8nuser",
        tier="db-f1-micro",
        version="POSTGRES_15",
        storage_size=20,
    )


@pytest.fixture
def cloud_run_config() -> CloudRunConfig:
    return CloudRunConfig(
        service_name="n8n-service",
        service_account_name="n8n-sa",
        cpu="1",
        memory="512Mi",
        max_instances=3,
        container_port=5678,
    )


@pytest.fixture
def deployment_config(db_config, cloud_run_config) -> DeploymentConfig:
    """A complete configuration with public access enabled."""
    return DeploymentConfig(
        gcp=GcpConfig(project=TEST_PROJECT, region=TEST_REGION),
        db=db_config,
        cloud_run=cloud_run_config,
        timezone="UTC",
        allow_unauthenticated=True,
    )
