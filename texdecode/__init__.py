"""Pure-Python decoders for BC1-BC7, ATC and ASTC textures to BGRA pixels."""

__version__ = "0.1.0"

__all__ = ["__version__"]