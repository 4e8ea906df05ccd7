"""Registries and their lifetime management."""
