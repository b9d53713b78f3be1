"""Verify GitHub activity thresholds and issue TEE-attested proof certificates."""
