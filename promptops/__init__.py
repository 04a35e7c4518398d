"""Prompt versioning, marketplace publication and deployment backend."""
