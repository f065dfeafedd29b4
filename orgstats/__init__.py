"""GitHub organization contribution reports"""

__version__ = "1.0.0"
