from .chat_cmds import register as register_chat
from .models_cmds import register as register_models

__all__ = [
    "register_chat",
    "register_models",
]
