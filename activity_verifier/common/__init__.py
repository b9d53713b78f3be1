"""Small utilities shared across verifier components."""
