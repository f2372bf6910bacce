"""Core domain: metric primitives, document building and encoding."""
