"""Custom exceptions for GemBump."""


class GemBumpError(Exception):
    """Base exception for GemBump errors."""


class ConfigError(GemBumpError):
    """Invalid configuration value in the environment."""


class RegistryError(GemBumpError):
    """Release history for a gem could not be fetched."""

    def __init__(self, gem_name: str, message: str):
        super().__init__(message)
        self.gem_name = gem_name


class RegistryHTTPError(RegistryError):
    """The registry answered with a non-success status."""

    def __init__(self, gem_name: str, status_code: int):
        super().__init__(gem_name, f"HTTP {status_code}")
        self.status_code = status_code


class RegistryTimeoutError(RegistryError):
    """The registry request timed out."""

    def __init__(self, gem_name: str):
        super().__init__(gem_name, "timeout")


class RegistryResponseError(RegistryError):
    """The registry body is not a valid release list."""
