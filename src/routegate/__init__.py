"""routegate - CORS gate and request adapter around the Starlette router"""

__version__ = "1.0.0"
