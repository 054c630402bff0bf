"""Platform adapters for the bridge ports."""
