"""Quote Card Editor - card rendering, hit testing and generation proxies."""

__version__ = "1.0.0"
