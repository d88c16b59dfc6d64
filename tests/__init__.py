"""
Test suite for the n8n on GCP Pulumi program.

- unit/: configuration, graph and per-component tests against Pulumi mocks
- conftest.py: recording mocks and shared configuration fixtures

Run tests with: pytest
"""
