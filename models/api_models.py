"""
Pydantic data models for API requests and responses.
Field names are camelCase on the wire and snake_case in Python.
"""
from typing import List, Literal, Optional
from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    """Base model accepting both camelCase and snake_case keys."""
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class KnowledgeBaseItem(CamelModel):
    """Reference to a knowledge-base file. Only the name reaches the prompt."""
    id: str = ""
    name: str
    url: Optional[str] = None


class ModelSettings(CamelModel):
    """Model choice and sampling parameters of an Optimizer."""
    provider: str = ""
    model: str
    temperature: float = 0.7
    max_tokens: Optional[int] = None
    top_p: Optional[float] = None
    backup_model: Optional[str] = None


class GenerationParams(CamelModel):
    """Generation parameters; only historyMessages is used by the pipeline."""
    history_messages: Optional[int] = Field(None, ge=0, description="Number of previous chat messages to include")


class Optimizer(CamelModel):
    """Stored Optimizer configuration sent along with each request."""
    id: str = ""
    name: Optional[str] = None
    system_prompt: str = ""
    knowledge_base: List[KnowledgeBaseItem] = Field(default_factory=list)
    model: ModelSettings
    generation_params: GenerationParams = Field(default_factory=GenerationParams)


class Message(BaseModel):
    """Chat message model."""
    role: Literal["user", "assistant"]
    content: str = ""


class Attachment(CamelModel):
    """Already-extracted text of a file attached to the current turn."""
    name: str = "file"
    type: str = ""
    size: int = 0
    text: str = ""


class GenerateRequest(CamelModel):
    """Body of POST /api/generate-optimized-content."""
    optimizer: Optional[Optimizer] = None
    user_input: Optional[str] = ""
    history: Optional[List[Message]] = None
    attachment: Optional[Attachment] = None


class OptimizerTestRequest(CamelModel):
    """Body of POST /api/test-optimizer."""
    optimizer: Optional[Optimizer] = None
    example_input: Optional[str] = ""
    history: Optional[List[Message]] = None
    attachment: Optional[Attachment] = None
