"""HTTP API for alert owners and operators."""
