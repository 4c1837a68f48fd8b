from pydantic import BaseModel, ConfigDict, Field, field_validator


class AskRequest(BaseModel):
    """Body of `POST /api/v1/oriento/ask`."""

    model_config = ConfigDict(populate_by_name=True, str_strip_whitespace=True)

    prompt: str = Field(min_length=1)
    # Omitted, null or blank -> start a new conversation
    conversation_id: str | None = Field(default=None, alias="conversationId")

    @field_validator("conversation_id")
    def blank_conversation_id_as_none(cls, v: str | None) -> str | None:
        return v or None


class AskResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    conversation_id: str = Field(alias="conversationId")
    response: str
