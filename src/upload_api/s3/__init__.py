"""S3 helpers for the upload service."""
