"""Board aggregate, workflow and service."""
