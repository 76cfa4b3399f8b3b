"""
Unified LLM service for routing to OpenAI or Anthropic based on model selection.
Used as the text-generation capability behind email generation and AI edits.
"""

import logging
from dataclasses import dataclass
from typing import Dict, Optional, Protocol
import httpx

logger = logging.getLogger(__name__)


@dataclass
class GenerationResult:
    text: str
    tokens_used: int = 0


class TextGenerator(Protocol):
    """Prompt in, text out. Implementations raise on failure."""

    def generate(
        self,
        prompt: str,
        max_tokens: int,
        system_message: Optional[str] = None,
    ) -> GenerationResult:
        ...


class LLMService:
    """Unified service for executing prompts with OpenAI or Anthropic"""

    # Map deprecated Anthropic model names to current ones
    ANTHROPIC_MODEL_MAPPING = {
        "claude-3-sonnet": "claude-3-opus-20240229",
    }

    # Tried in order when the requested Anthropic model is not found
    ANTHROPIC_FALLBACK_MODELS = [
        "claude-sonnet-4-5-20250929",
        "claude-3-5-sonnet-20241022",
        "claude-3-haiku-20240307",
    ]

    def __init__(
        self,
        openai_api_key: Optional[str] = None,
        anthropic_api_key: Optional[str] = None,
        model: str = "claude-sonnet-4-20250514",
        timeout: float = 120.0,
    ):
        self.openai_api_key = openai_api_key
        self.anthropic_api_key = anthropic_api_key
        self.model = model
        self.timeout = timeout

    def _is_anthropic_model(self, model: str) -> bool:
        """Check if model is an Anthropic model"""
        return model.lower().startswith("claude-")

    def _is_openai_model(self, model: str) -> bool:
        """Check if model is an OpenAI model"""
        model_lower = model.lower()
        return model_lower.startswith("gpt-") or model_lower.startswith("o1-")

    def _normalize_anthropic_model(self, model: str) -> str:
        """Normalize Anthropic model name, mapping deprecated names to current ones"""
        normalized = self.ANTHROPIC_MODEL_MAPPING.get(model, model)
        if normalized != model:
            logger.info(f"Mapping deprecated model '{model}' to '{normalized}'")
        return normalized

    def generate(
        self,
        prompt: str,
        max_tokens: int,
        system_message: Optional[str] = None,
    ) -> GenerationResult:
        """Run a single prompt against the configured model."""
        result = self.execute_prompt(system_message or "", prompt, self.model, max_tokens=max_tokens)
        return GenerationResult(text=result["content"], tokens_used=result["tokens_used"] or 0)

    def execute_prompt(
        self,
        system_message: str,
        user_message: str,
        model: str,
        max_tokens: int = 4096,
    ) -> Dict:
        """
        Execute a prompt with system and user messages.
        Routes to appropriate provider based on model name.

        Args:
            system_message: The system prompt message
            user_message: The user input message
            model: LLM model identifier (e.g., "gpt-4o-mini" or "claude-sonnet-4-20250514")
            max_tokens: Upper bound on generated tokens

        Returns:
            Dict with content, tokens_used, and model
        """
        if self._is_anthropic_model(model):
            normalized_model = self._normalize_anthropic_model(model)
            logger.info(f"Routing to Anthropic API for model: {model} (normalized: {normalized_model})")
            return self._execute_anthropic(system_message, user_message, normalized_model, max_tokens)
        elif self._is_openai_model(model):
            logger.info(f"Routing to OpenAI API for model: {model}")
            return self._execute_openai(system_message, user_message, model, max_tokens)
        else:
            logger.warning(f"Unknown model pattern '{model}', defaulting to OpenAI")
            return self._execute_openai(system_message, user_message, model, max_tokens)

    def _execute_openai(
        self,
        system_message: str,
        user_message: str,
        model: str,
        max_tokens: int,
    ) -> Dict:
        """Execute prompt using OpenAI API"""
        if not self.openai_api_key:
            raise RuntimeError("OpenAI service is not configured. Set OPENAI_API_KEY.")

        try:
            from openai import OpenAI

            client = OpenAI(
                api_key=self.openai_api_key,
                http_client=httpx.Client(timeout=self.timeout)
            )

            messages = []
            if system_message:
                messages.append({"role": "system", "content": system_message})
            messages.append({"role": "user", "content": user_message})

            request_params = {"model": model, "messages": messages}

            # o1 models reject max_tokens
            if not model.lower().startswith("o1"):
                request_params["max_tokens"] = max_tokens

            response = client.chat.completions.create(**request_params)

            content = response.choices[0].message.content or ""
            tokens_used = response.usage.total_tokens if response.usage else 0

            return {
                "content": content,
                "tokens_used": tokens_used,
                "model": model
            }

        except Exception as e:
            logger.error(f"Failed to execute prompt with OpenAI: {e}")
            raise RuntimeError(f"Failed to execute prompt: {str(e)}")

    def _execute_anthropic(
        self,
        system_message: str,
        user_message: str,
        model: str,
        max_tokens: int,
    ) -> Dict:
        """Execute prompt using Anthropic API"""
        if not self.anthropic_api_key:
            raise RuntimeError("Anthropic service is not configured. Set ANTHROPIC_API_KEY.")

        try:
            from anthropic import Anthropic

            logger.info(f"Executing Anthropic prompt with model: {model}, user_message length: {len(user_message)}")

            client = Anthropic(
                api_key=self.anthropic_api_key,
                http_client=httpx.Client(timeout=self.timeout)
            )

            # Anthropic requires non-empty user content
            user_content = user_message.strip() if user_message and user_message.strip() else "Please proceed."

            request_params = {
                "model": model,
                "max_tokens": max_tokens,
                "messages": [
                    {
                        "role": "user",
                        "content": [{"type": "text", "text": user_content}]
                    }
                ]
            }
            if system_message and system_message.strip():
                request_params["system"] = system_message.strip()

            # Try the requested model first, then fallback models if it's not found
            models_to_try = [model] + [m for m in self.ANTHROPIC_FALLBACK_MODELS if m != model]
            response = None
            successful_model = None

            for model_to_try in models_to_try:
                try:
                    request_params["model"] = model_to_try
                    response = client.messages.create(**request_params)
                    successful_model = model_to_try
                    break
                except Exception as api_error:
                    error_str = str(api_error).lower()
                    is_not_found = (
                        'not_found' in error_str or
                        'not found' in error_str or
                        getattr(api_error, 'status_code', None) == 404
                    )
                    if is_not_found and model_to_try != models_to_try[-1]:
                        logger.warning(f"Model '{model_to_try}' not found, trying fallback models...")
                        continue
                    raise

            # Anthropic returns a list of content blocks
            content = "".join(
                block.text for block in response.content
                if getattr(block, "type", "text") == "text" and getattr(block, "text", None)
            )

            if response.usage:
                input_tokens = response.usage.input_tokens
                output_tokens = response.usage.output_tokens
                tokens_used = input_tokens + output_tokens
                logger.info(f"Anthropic tokens used: {tokens_used} (input: {input_tokens}, output: {output_tokens})")
            else:
                tokens_used = 0
                logger.warning("Anthropic response has no usage information")

            return {
                "content": content,
                "tokens_used": tokens_used,
                "model": successful_model
            }

        except Exception as e:
            error_details = str(e)
            if hasattr(e, 'status_code'):
                error_details += f" (Status: {e.status_code})"
            logger.error(f"Failed to execute prompt with Anthropic: {type(e).__name__}: {error_details}", exc_info=True)
            raise RuntimeError(f"Failed to execute prompt with Anthropic: {error_details}")
