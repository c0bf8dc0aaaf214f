"""Version of the tenantry distribution."""
__version__ = "0.1.0"
