"""Infrastructure layer: Go toolchain adapters and filesystem access."""
