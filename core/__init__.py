"""Core utilities shared across the doctor."""
