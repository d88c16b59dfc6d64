"""
n8n on Google Cloud.

Pulumi program that runs n8n on Cloud Run backed by Cloud SQL for
PostgreSQL, with credentials held in Secret Manager and a dedicated,
least-privilege service account.
"""

__version__ = "0.1.0"
