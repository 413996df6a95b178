"""HTTP control API for migration runs."""
