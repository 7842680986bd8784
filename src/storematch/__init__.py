"""
storematch: matching de fundadores con locales comerciales.
"""

__version__ = "0.1.0"
