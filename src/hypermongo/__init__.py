"""hypermongo — MongoDB data adapter for the hyper data port."""

__version__ = "0.1.0"
