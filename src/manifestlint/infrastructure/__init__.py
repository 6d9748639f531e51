"""Infrastructure layer — reading manifests from disk."""
