"""Domain layer: entities, exceptions, ports and matching rules."""
