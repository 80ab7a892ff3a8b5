"""
toolbelt – Main entry point.

Minimal bootstrap script to verify the package imports and settings load.
"""

from toolbelt import __version__
from toolbelt.config.settings import get_settings


def main() -> None:
    """Print a bootstrap confirmation message."""
    settings = get_settings()
    print(
        f"toolbelt {__version__} bootstrap complete "
        f"(rate compensation {settings.rate_limiter.compensation_ms} ms, "
        f"log level {settings.logging.level})"
    )


if __name__ == "__main__":
    main()
