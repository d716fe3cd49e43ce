"""Domain layer: entity models, repositories and services."""
