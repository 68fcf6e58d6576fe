"""holen — fetch and run command-line utilities described by manifests."""

__version__ = "0.1.0"
