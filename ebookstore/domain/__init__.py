"""Domain layer: entities, repository protocols and services."""
