"""Pipeline services: normalization, reconciliation, analytics, orchestration."""
