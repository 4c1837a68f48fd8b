from .oriento import ORIENTO_SYSTEM_INSTRUCTION, DEFAULT_MODEL_NAME, build_chat_config

__all__ = ["ORIENTO_SYSTEM_INSTRUCTION", "DEFAULT_MODEL_NAME", "build_chat_config"]
