"""Integrity tests with running example server."""
