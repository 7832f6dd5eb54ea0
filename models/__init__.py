"""
Models package exports.
"""
from models.api_models import (
    Attachment,
    GenerateRequest,
    GenerationParams,
    KnowledgeBaseItem,
    Message,
    ModelSettings,
    Optimizer,
    OptimizerTestRequest,
)
from models.generation_models import (
    FramedConversation,
    GenerationConfig,
    GenerationContext,
    GenerationResult,
    InvokeState,
    ProviderQuirk,
)

__all__ = [
    'Attachment',
    'GenerateRequest',
    'GenerationParams',
    'KnowledgeBaseItem',
    'Message',
    'ModelSettings',
    'Optimizer',
    'OptimizerTestRequest',
    'FramedConversation',
    'GenerationConfig',
    'GenerationContext',
    'GenerationResult',
    'InvokeState',
    'ProviderQuirk',
]
