"""HTTP quote service."""
