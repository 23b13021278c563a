"""
Core upload logic.

This module is framework-agnostic - it doesn't import FastAPI or boto3.
The host platform and the object store are reached through protocols.
"""
