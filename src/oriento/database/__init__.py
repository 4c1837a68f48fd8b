from .base import Base
from .session import build_engine, build_session_maker

__all__ = ["Base", "build_engine", "build_session_maker"]
