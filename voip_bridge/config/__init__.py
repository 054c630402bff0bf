"""Bridge configuration."""
