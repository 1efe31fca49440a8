"""HTTP error handling shared by the routers."""
