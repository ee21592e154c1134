from .base import CRUDService, Mutation

__all__ = ["CRUDService", "Mutation"]
