from fastapi import APIRouter, Depends

from ..generation import GenerationService, get_generation_service
from ..schemas import GenerateRequest, GenerateResponse

router = APIRouter(prefix="/api", tags=["generate"])

QUICK_THREAD_ID = "default"


def _to_response(result) -> GenerateResponse:
    return GenerateResponse(
        success=result.success,
        response=result.response,
        timestamp=result.timestamp,
        threadID=result.thread_id,
        historyLength=result.history_length,
    )


@router.post("/generate", response_model=GenerateResponse)
@router.post("/generate-cv", response_model=GenerateResponse)
async def generate(body: GenerateRequest, service: GenerationService = Depends(get_generation_service)):
    """Generate CV text, optionally continuing an existing conversation thread."""
    result = await service.generate(body)
    return _to_response(result)


@router.get("/prompt={prompt}", response_model=GenerateResponse)
async def quick_prompt(prompt: str, service: GenerationService = Depends(get_generation_service)):
    """Text-only generation on the shared default thread, prompt taken from the path."""
    result = await service.generate(GenerateRequest(prompt=prompt, threadID=QUICK_THREAD_ID))
    return _to_response(result)
