from pydantic import BaseModel, Field, field_validator
from typing import Any, List, Optional


def _blank_to_none(value: Any) -> Any:
    """Whitespace-only strings count as absent."""
    if isinstance(value, str):
        value = value.strip()
        return value or None
    return value


class GenerateRequest(BaseModel):
    prompt: Optional[str] = None
    cvData: Optional[Any] = None
    threadID: Optional[str] = None
    imageUrl: Optional[str] = None
    customPromptTemplate: Optional[str] = None
    temperature: float = Field(default=0.7, ge=0.0, le=2.0)
    maxTokens: int = Field(default=1500, ge=1)
    systemPrompt: Optional[str] = None
    clearHistory: bool = False

    @field_validator("prompt", "cvData")
    @classmethod
    def normalize_blank(cls, v):
        return _blank_to_none(v)


class GenerateResponse(BaseModel):
    success: bool = True
    response: str
    timestamp: str
    threadID: str
    historyLength: int


class FormatCVRequest(BaseModel):
    cvData: Optional[Any] = None
    style: str = "professional"

    @field_validator("cvData")
    @classmethod
    def normalize_blank(cls, v):
        return _blank_to_none(v)


class ImproveCVRequest(BaseModel):
    cvSection: Optional[str] = None
    currentContent: Optional[str] = None
    jobTitle: Optional[str] = None
    industry: Optional[str] = None


class SuggestionResponse(BaseModel):
    success: bool = True
    response: str
    timestamp: str


class TurnOut(BaseModel):
    speaker: str
    text: str


class ConversationOut(BaseModel):
    success: bool = True
    threadID: str
    history: List[TurnOut]


class ErrorResponse(BaseModel):
    success: bool = False
    error: str
    message: Optional[str] = None
