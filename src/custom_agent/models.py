from __future__ import annotations

from typing import List, Optional

from pydantic import BaseModel


class ModelRoles:
    chat = "chat-model"
    reasoning = "chat-model-reasoning"
    title = "title-model"
    artifact = "artifact-model"


# Order matters for display: user-facing roles first.
LANGUAGE_MODEL_IDS = (
    ModelRoles.chat,
    ModelRoles.reasoning,
    ModelRoles.title,
    ModelRoles.artifact,
)

# Image model id used when CUSTOM_AGENT_IMAGE_MODEL is set.
SMALL_IMAGE_MODEL_ID = "small-model"

DEFAULT_CHAT_MODEL = ModelRoles.chat


class ChatModel(BaseModel):
    """A chat model the user can pick in a model selector."""

    id: str
    name: str
    description: str


chat_models: List[ChatModel] = [
    ChatModel(
        id=ModelRoles.chat,
        name="Chat model",
        description="Primary model for all-purpose chat via custom agent backend",
    ),
    ChatModel(
        id=ModelRoles.reasoning,
        name="Reasoning model",
        description="Uses advanced reasoning via custom agent backend",
    ),
]


def get_chat_model(model_id: str) -> Optional[ChatModel]:
    return next((m for m in chat_models if m.id == model_id), None)
