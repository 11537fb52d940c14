from fastapi import APIRouter, Depends

from ..errors import ConversationNotFoundError
from ..generation import GenerationService, get_generation_service
from ..schemas import ConversationOut, TurnOut

router = APIRouter(prefix="/api/conversation", tags=["conversations"])


@router.get("/{threadID}", response_model=ConversationOut)
def get_conversation(threadID: str, service: GenerationService = Depends(get_generation_service)):
    try:
        turns = service.store.read(threadID)
    except KeyError:
        raise ConversationNotFoundError(f"No conversation with id {threadID}")
    return ConversationOut(threadID=threadID, history=[TurnOut(**t.to_dict()) for t in turns])


@router.delete("/{threadID}", response_model=ConversationOut)
def clear_conversation(threadID: str, service: GenerationService = Depends(get_generation_service)):
    """Reset a thread to empty; unknown threads are created empty."""
    service.store.clear(threadID)
    return ConversationOut(threadID=threadID, history=[])
