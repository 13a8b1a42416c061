"""Deployment pipeline helpers."""
