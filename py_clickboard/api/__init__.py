"""HTTP API for board generation."""
