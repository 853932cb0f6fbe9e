"""PlaceHub - multi-site, multilingual directory of places"""

__version__ = "0.1.0"
