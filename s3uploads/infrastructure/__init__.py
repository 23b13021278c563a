"""
Infrastructure layer - external service integrations.

- storage: S3 object storage (plus an in-memory mock)
- host: Host platform implementations (settings persistence, config)
"""
