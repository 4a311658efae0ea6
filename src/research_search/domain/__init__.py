"""Domain layer: entities with no dependency on application or infrastructure code."""
