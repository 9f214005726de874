from .pydantic_base_model import BaseModel

__all__ = ["BaseModel"]
