"""Gemini model client for structured prompt calls.

ModelClient.generate() sends one PromptTemplate invocation to Gemini:

1. Checks the input is an instance of the prompt's input schema
2. Renders the template and attaches the photo as an inline bytes part
3. Calls Gemini in JSON mode with the output schema, bounded by MODEL_TIMEOUT_SECONDS
4. Parses the response leniently and validates it against the output schema

Any failure raises ModelInvocationError (SchemaValidationError for shape
problems). There are no retries: callers treat a failure as terminal for the
request.
"""

import asyncio
import json
import re
import time
from functools import lru_cache
from typing import Optional

from google import genai
from google.genai import types
from pydantic import BaseModel, ValidationError

from recipe_vision.flows.images import prepare_image_for_model
from recipe_vision.models.errors import ModelInvocationError, SchemaValidationError
from recipe_vision.models.models import ImageInput
from recipe_vision.prompts.prompts import PromptTemplate
from recipe_vision.utils.config import config
from recipe_vision.utils.logger import logger


def parse_json_response(response_text: Optional[str]) -> Optional[dict]:
    """Parse a JSON object from model output, tolerating text around it.

    Tries a direct json.loads() first, then the outermost ``{...}`` block.

    Args:
        response_text: Raw response text from Gemini.

    Returns:
        Parsed dict, or None if no JSON object could be recovered.
    """
    if not response_text:
        return None

    try:
        parsed = json.loads(response_text)
    except json.JSONDecodeError:
        logger.debug("Direct JSON parse failed, trying regex extraction")
        json_match = re.search(r"\{.*\}", response_text, re.DOTALL)
        if not json_match:
            return None
        try:
            parsed = json.loads(json_match.group())
        except json.JSONDecodeError:
            return None

    return parsed if isinstance(parsed, dict) else None


class ModelClient:
    """Invoke structured prompts against the hosted Gemini model.

    Args:
        client: Optional pre-built ``genai.Client``. When omitted, one is
            created on first use from GEMINI_API_KEY.
    """

    def __init__(self, client: Optional[genai.Client] = None) -> None:
        self._client = client

    @property
    def client(self) -> genai.Client:
        if self._client is None:
            self._client = genai.Client(api_key=config.GEMINI_API_KEY)
        return self._client

    def _build_config(self, prompt: PromptTemplate) -> types.GenerateContentConfig:
        safety_settings = [
            types.SafetySetting(category=category, threshold=threshold)
            for category, threshold in prompt.safety_settings.items()
        ]
        return types.GenerateContentConfig(
            response_mime_type="application/json",
            response_json_schema=prompt.output_schema.model_json_schema(),
            temperature=config.TEMPERATURE,
            max_output_tokens=config.MAX_OUTPUT_TOKENS,
            safety_settings=safety_settings or None,
        )

    def _build_contents(self, prompt: PromptTemplate, prompt_input: BaseModel) -> list[types.Part]:
        parts = [types.Part.from_text(text=prompt.render(prompt_input))]
        photo = getattr(prompt_input, prompt.media_field, None)
        if isinstance(photo, ImageInput):
            image_bytes, mime_type = prepare_image_for_model(photo)
            parts.append(types.Part.from_bytes(data=image_bytes, mime_type=mime_type))
        return parts

    async def generate(self, prompt: PromptTemplate, prompt_input: BaseModel) -> BaseModel:
        """Run one prompt and return its validated output.

        Args:
            prompt: Prompt template with input/output schemas.
            prompt_input: Instance of ``prompt.input_schema``.

        Returns:
            Instance of ``prompt.output_schema``.

        Raises:
            SchemaValidationError: Input has the wrong type, or the response is
                empty, not JSON, or fails the output schema.
            ModelInvocationError: The call errored, was blocked, or timed out.
        """
        if not isinstance(prompt_input, prompt.input_schema):
            raise SchemaValidationError(
                f"{prompt.name} expects {prompt.input_schema.__name__}, got {type(prompt_input).__name__}",
                prompt=prompt.name,
            )

        model = prompt.model or config.GEMINI_MODEL
        log_context = {"prompt": prompt.name}
        logger.info(f"Calling {model} for {prompt.name}", extra=log_context)
        started = time.perf_counter()

        try:
            response = await asyncio.wait_for(
                self.client.aio.models.generate_content(
                    model=model,
                    contents=self._build_contents(prompt, prompt_input),
                    config=self._build_config(prompt),
                ),
                timeout=config.MODEL_TIMEOUT_SECONDS,
            )
        except asyncio.TimeoutError as e:
            raise ModelInvocationError(
                f"{prompt.name} timed out after {config.MODEL_TIMEOUT_SECONDS}s", prompt=prompt.name
            ) from e
        except Exception as e:
            raise ModelInvocationError(f"{prompt.name} call failed: {e}", prompt=prompt.name) from e

        elapsed_ms = int((time.perf_counter() - started) * 1000)
        logger.debug(f"{prompt.name} responded in {elapsed_ms}ms", extra=log_context)

        return self._validate_response(prompt, response)

    def _validate_response(self, prompt: PromptTemplate, response) -> BaseModel:
        response_text = response.text
        if not response_text:
            feedback = getattr(response, "prompt_feedback", None)
            block_reason = getattr(feedback, "block_reason", None)
            if block_reason:
                raise ModelInvocationError(f"{prompt.name} blocked by provider: {block_reason}", prompt=prompt.name)
            raise SchemaValidationError(f"{prompt.name} returned an empty response", prompt=prompt.name)

        parsed = parse_json_response(response_text)
        if parsed is None:
            logger.warning(f"Failed to parse JSON from {prompt.name} response", extra={"prompt": prompt.name})
            raise SchemaValidationError(f"{prompt.name} returned non-JSON output", prompt=prompt.name)

        try:
            return prompt.output_schema.model_validate(parsed)
        except ValidationError as e:
            raise SchemaValidationError(
                f"{prompt.name} output failed {prompt.output_schema.__name__} validation: {e}",
                prompt=prompt.name,
            ) from e


@lru_cache(maxsize=1)
def get_model_client() -> ModelClient:
    """Process-wide ModelClient (FastAPI dependency and action default)."""
    return ModelClient()
