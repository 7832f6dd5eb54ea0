"""
Route handler for content generation.
Handles the /api/generate-optimized-content endpoint.
"""
from typing import Optional

from fastapi import APIRouter, BackgroundTasks, Header, status
from fastapi.responses import JSONResponse

from auth import get_optional_caller
from models.api_models import GenerateRequest
from services.generation_service import GenerationService
from services.providers import ModelGateway, OpenAIChatFallback
from services.usage_service import UsageService
from utils.constants import INTERNAL_ERROR, MISSING_FIELDS_ERROR, ResultSource
from utils.logger import app_logger

router = APIRouter()


@router.post("/api/generate-optimized-content")
async def generate_optimized_content(
    request: GenerateRequest,
    background_tasks: BackgroundTasks,
    authorization: Optional[str] = Header(None)
):
    """
    Generate content with the selected Optimizer.

    Provider failures never surface as errors: the response then carries an
    apology message with status 200.
    """
    optimizer = request.optimizer
    user_input = request.user_input or ""

    if optimizer is None or not user_input.strip():
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content={"error": MISSING_FIELDS_ERROR}
        )

    try:
        caller = await get_optional_caller(authorization)

        service = GenerationService(gateway=ModelGateway(), fallback=OpenAIChatFallback())
        context = GenerationService.build_context(
            optimizer=optimizer,
            user_input=user_input,
            history=request.history,
            attachment=request.attachment,
            caller_id=caller.uid if caller else None
        )
        result = await service.generate(context)

        # Metering runs after the response is sent
        if context.caller_id and result.source != ResultSource.SENTINEL:
            background_tasks.add_task(
                UsageService.record_usage,
                context.caller_id,
                result.full_prompt,
                result.text,
                optimizer.id,
                optimizer.name
            )

        return {"optimizedContent": result.text}

    except Exception as e:
        app_logger.error(f"Generation route error: {type(e).__name__}: {e}")
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={"error": INTERNAL_ERROR}
        )
