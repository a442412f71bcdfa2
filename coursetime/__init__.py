"""Course development time analytics: ingest, reconcile and aggregate
Legacy, Modern and Time Spent spreadsheet exports."""

__version__ = "0.1.0"
