"""Configuration, security, storage and logging primitives."""
