from .settings import InspectionSettings

__all__ = ["InspectionSettings"]
