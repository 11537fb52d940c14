"""
Stateless CV helpers: formatting suggestions, section improvements and the
static prompt guide. None of these touch conversation history.
"""
from fastapi import APIRouter, Depends

from ..errors import InvalidRequestError
from ..generation import GenerationService, get_generation_service, utc_timestamp
from ..prompts import PROMPT_GUIDE, build_format_prompt, build_improve_prompt
from ..schemas import FormatCVRequest, ImproveCVRequest, SuggestionResponse

router = APIRouter(prefix="/api", tags=["cv"])


@router.post("/format-cv", response_model=SuggestionResponse)
async def format_cv(body: FormatCVRequest, service: GenerationService = Depends(get_generation_service)):
    if body.cvData is None:
        raise InvalidRequestError("cvData is required")
    text = await service.suggest(build_format_prompt(body.cvData, body.style))
    return SuggestionResponse(response=text, timestamp=utc_timestamp())


@router.post("/improve-cv", response_model=SuggestionResponse)
async def improve_cv(body: ImproveCVRequest, service: GenerationService = Depends(get_generation_service)):
    if not body.cvSection or not body.currentContent:
        raise InvalidRequestError("cvSection and currentContent are required")
    prompt = build_improve_prompt(body.cvSection, body.currentContent, body.jobTitle, body.industry)
    text = await service.suggest(prompt)
    return SuggestionResponse(response=text, timestamp=utc_timestamp())


@router.get("/prompt-guide")
async def prompt_guide():
    return {"success": True, "guide": PROMPT_GUIDE}
