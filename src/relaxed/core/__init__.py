"""Core abstractions shared by every converter."""
