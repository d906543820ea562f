"""Pure domain layer: graph model, error types, collaborator protocols."""
