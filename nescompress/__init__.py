"""
NES Compress

Table-driven decoder and run-length encoders for the compression formats
NES games use to store nametables, attribute tables and palettes.
"""

__version__ = "0.3.0"

APP_NAME = "NESCompress"
APP_STAGE = "alpha"
APP_AUTHOR = "SpiderDave"
APP_URL = "https://github.com/spiderdave"


def app_info() -> str:
    """One-line banner shown by --version and the usage text."""
    return f"{APP_NAME} v{__version__}-{APP_STAGE} by {APP_AUTHOR} ({APP_URL})"
