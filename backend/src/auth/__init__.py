"""Authentication and authorization for the document service."""
