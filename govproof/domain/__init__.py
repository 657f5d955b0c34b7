"""Domain layer: models, errors, and pure services for governance decisions."""
