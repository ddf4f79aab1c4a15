"""REST API for Protoforge."""
