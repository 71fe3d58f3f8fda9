"""HTTP API for Spec Harvest."""
