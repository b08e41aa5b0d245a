"""Helper modules for runtime configuration."""

from .dotenv_loader import parse_dotenv, read_dotenv

__all__ = ["parse_dotenv", "read_dotenv"]
