"""Administrator authentication for the settings form."""
