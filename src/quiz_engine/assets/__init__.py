"""Sample quiz documents bundled with the package."""
