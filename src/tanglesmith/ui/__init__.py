"""User interfaces built on top of the tangle API."""
