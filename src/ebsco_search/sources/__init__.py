"""Search source adapters."""
