from .ask import AskRequest, AskResponse

__all__ = ["AskRequest", "AskResponse"]
