"""Matrix room member badge service."""

__version__ = "1.0.0"
