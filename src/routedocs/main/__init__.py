"""Configuration and logging shared by the rest of the package."""
