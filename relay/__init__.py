"""Capture relay: on-demand capture and versioned answer distribution."""
