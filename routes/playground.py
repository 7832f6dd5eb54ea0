"""
Route handler for admin test runs of an Optimizer.
Returns the AI response together with the complete prompt sent to the model.
"""
from typing import Optional

from fastapi import APIRouter, Header, status
from fastapi.responses import JSONResponse

from auth import AuthError, PermissionDeniedError, auth_error_response, require_admin
from models.api_models import OptimizerTestRequest
from services.generation_service import GenerationService
from services.providers import ModelGateway, OpenAIChatFallback
from utils.constants import INTERNAL_ERROR, MISSING_TEST_FIELDS_ERROR
from utils.logger import app_logger

router = APIRouter()


@router.post("/api/test-optimizer")
async def run_optimizer_test(request: OptimizerTestRequest, authorization: Optional[str] = Header(None)):
    """Run an Optimizer against an example input. Admin only."""
    try:
        caller = await require_admin(authorization)
    except (AuthError, PermissionDeniedError) as e:
        return auth_error_response(e)

    optimizer = request.optimizer
    example_input = request.example_input or ""

    if optimizer is None or not example_input.strip():
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content={"error": MISSING_TEST_FIELDS_ERROR}
        )

    try:
        service = GenerationService(gateway=ModelGateway(), fallback=OpenAIChatFallback())
        context = GenerationService.build_context(
            optimizer=optimizer,
            user_input=example_input,
            history=request.history,
            attachment=request.attachment,
            caller_id=caller.uid
        )
        result = await service.generate(context)
        app_logger.info(f"Test run of optimizer '{optimizer.id}' by {caller.uid}: {result.source}")

        return {"aiResponse": result.text, "fullPrompt": result.full_prompt}

    except Exception as e:
        app_logger.error(f"Test optimizer error: {type(e).__name__}: {e}")
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={"error": INTERNAL_ERROR}
        )
