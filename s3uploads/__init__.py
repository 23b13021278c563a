"""
S3 File Uploads - persist files and images submitted through a host
platform to S3 and hand back a public URL.

This package contains the complete application:
- core: Framework-agnostic upload pipeline
- infrastructure: S3 client and host platform implementations
- api: FastAPI routes and dependencies
- config: Application configuration
"""

__version__ = "0.1.0"
