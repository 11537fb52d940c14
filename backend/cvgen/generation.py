"""
Generation orchestration.

One request flows through:
    validate -> fetch/encode image (optional) -> resolve thread id -> compose prompt
    -> model call under RetryPolicy -> clear (optional) + record turns -> respond

The store is only written after the model call returns, so any failure leaves
it exactly as it was: no new thread, no cleared history, no partial turns.
A clearHistory request composes with an empty context.
"""
import logging
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any, List, Optional, Union

from .config import Settings, get_settings
from .conversation import ASSISTANT, USER, ConversationStore, InMemoryConversationStore
from .errors import GenerationFailedError, InvalidRequestError, ProviderOverloadedError
from .gemini_client import GeminiClient, ModelClient
from .images import ImageFetcher, encode_image
from .prompts import PromptComposer, serialize_cv_data
from .retry import RetryPolicy
from .schemas import GenerateRequest

logger = logging.getLogger(__name__)


def utc_timestamp() -> str:
    return datetime.now(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")


@dataclass
class GenerationResult:
    response: str
    timestamp: str
    thread_id: str
    history_length: int
    success: bool = True


class GenerationService:
    def __init__(
        self,
        store: ConversationStore,
        model_client: ModelClient,
        retry: RetryPolicy,
        image_fetcher: ImageFetcher,
        composer: Optional[PromptComposer] = None,
        settings: Optional[Settings] = None,
    ):
        self.store = store
        self.model_client = model_client
        self.retry = retry
        self.image_fetcher = image_fetcher
        self.composer = composer or PromptComposer()
        self.settings = settings or get_settings()

    @staticmethod
    def validate(request: GenerateRequest) -> None:
        # prompt and cvData arrive normalized: blank values are already None
        if request.prompt is None and request.cvData is None:
            raise InvalidRequestError("Either prompt or cvData is required")

    async def generate(self, request: GenerateRequest) -> GenerationResult:
        self.validate(request)

        image_part = None
        if request.imageUrl:
            raw = await self.image_fetcher.fetch(request.imageUrl)
            image_part = encode_image(raw)

        thread_id = request.threadID or self.store.new_id()

        logger.info(f"Generating for thread {thread_id} (image={image_part is not None})")
        system_prompt = request.systemPrompt or self.settings.system_prompt
        context = "" if request.clearHistory else self.store.render_context(thread_id)
        contents = self.composer.compose(request, context, system_prompt, image_part)

        model = self.settings.vision_model if image_part is not None else self.settings.text_model
        text = await self.invoke(model, contents, request.temperature, request.maxTokens)

        self.store.get_or_create(thread_id)
        if request.clearHistory:
            self.store.clear(thread_id)
        user_text = request.prompt if request.prompt is not None else serialize_cv_data(request.cvData)
        self.store.append(thread_id, USER, user_text)
        history_length = self.store.append(thread_id, ASSISTANT, text)

        return GenerationResult(
            response=text,
            timestamp=utc_timestamp(),
            thread_id=thread_id,
            history_length=history_length,
        )

    async def suggest(self, prompt: str, temperature: float = 0.7, max_tokens: int = 1500) -> str:
        """Stateless single prompt call, nothing is recorded in history."""
        system_prompt = self.settings.system_prompt
        return await self.invoke(self.settings.text_model, f"{system_prompt}\n\n{prompt}", temperature, max_tokens)

    async def invoke(self, model: str, contents: Union[str, List[Any]], temperature: float, max_tokens: int) -> str:
        async def call():
            return await self.model_client.generate(model, contents, temperature, max_tokens)

        try:
            return await self.retry.execute(call)
        except Exception as e:
            logger.error(f"Generation failed on {model}: {e}")
            if self.retry.is_transient(e):
                raise ProviderOverloadedError(str(e))
            raise GenerationFailedError(str(e))


def build_generation_service(settings: Settings) -> GenerationService:
    return GenerationService(
        store=InMemoryConversationStore(max_turns=settings.max_history),
        model_client=GeminiClient(
            api_key=settings.gemini_api_key,
            base_url=settings.gemini_base_url,
            timeout=settings.request_timeout,
        ),
        retry=RetryPolicy(
            max_retries=settings.max_retries,
            initial_delay_ms=settings.retry_initial_delay_ms,
        ),
        image_fetcher=ImageFetcher(timeout=settings.image_timeout),
        settings=settings,
    )


_service: Optional[GenerationService] = None


def get_generation_service() -> GenerationService:
    """Process-wide service instance (one shared conversation store)."""
    global _service
    if _service is None:
        _service = build_generation_service(get_settings())
    return _service
