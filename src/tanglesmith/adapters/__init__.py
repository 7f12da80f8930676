"""Adapters bridging third-party parsers with the tangle core."""
