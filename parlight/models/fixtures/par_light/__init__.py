from .par_light import ParLight

__all__ = ["ParLight"]
