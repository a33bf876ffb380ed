"""HTTP API for the Atelier composite generator."""
