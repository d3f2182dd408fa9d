"""Request schemas for the HTTP API.

Dependencies: pydantic
"""

from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field
from pydantic import ValidationError as PydanticValidationError

from ragfolio.errors import ValidationError


class DocumentMetadata(BaseModel):
    """Optional metadata attached to an ingested document."""

    source: str | None = None
    tags: list[str] | None = None
    type: str | None = None


class IngestDocumentRequest(BaseModel):
    """Request schema for document ingestion."""

    content: str = Field(min_length=1, description="Document text")
    metadata: DocumentMetadata = Field(default_factory=DocumentMetadata)


class ChatMessage(BaseModel):
    """One caller-supplied history message."""

    role: Literal["user", "assistant"]
    content: str


class ChatQueryRequest(BaseModel):
    """Request schema for chat questions."""

    model_config = ConfigDict(populate_by_name=True)

    question: str = Field(min_length=1, description="User question")
    conversation_id: str | None = Field(default=None, alias="conversationId")
    language: Literal["en", "id"] = "en"
    chat_history: list[ChatMessage] = Field(default_factory=list, alias="chatHistory")


def parse_request(schema: type[BaseModel], data: Any) -> Any:
    """Validate a JSON body against a schema.

    Raises:
        ValidationError: With one detail per violation (field path, message)
    """
    if data is None:
        raise ValidationError(
            "Validation error", details=[{"field": "body", "message": "JSON body required"}]
        )
    try:
        return schema.model_validate(data)
    except PydanticValidationError as e:
        details = [
            {"field": ".".join(str(part) for part in error["loc"]), "message": error["msg"]}
            for error in e.errors()
        ]
        raise ValidationError("Validation error", details=details) from e
