"""DATAMODELER

Core of a visual data-modeling application. Keeps systems, their connection
configuration and domain associations normalized, and keeps the layered
object/relationship graph of every data model internally consistent.
"""

__all__ = ["__version__"]
__version__ = "0.1.0"
