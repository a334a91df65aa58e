"""Click command groups, one module per resource."""
