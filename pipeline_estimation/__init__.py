"""
Production schedule estimation for a flow-shop cabinet pipeline.
"""

__version__ = "0.1.0"
