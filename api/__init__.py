"""Local HTTP surface for the vault session."""
