from .nominal import to_nominal

__all__ = ['to_nominal']
