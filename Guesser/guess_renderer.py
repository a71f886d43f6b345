"""
Turns the guessed entity into the text shown to the player

- TemplateGuessRenderer: 'Are you thinking of "<name>"?'
- LLMGuessRenderer: asks an OpenAI compatible server (e.g. vLLM) for an Akinator style guess,
  falls back to the template whenever anything goes wrong
"""

import asyncio
import os
import logging

from openai import AsyncOpenAI
from pydantic import BaseModel, Field, ValidationError
from tenacity import AsyncRetrying, stop_after_attempt, wait_random_exponential

logger = logging.getLogger(__name__)

UNKNOWN_ENTITY = "a character I don't know"
GUESS_TEMPLATE = 'Are you thinking of "{name}"?'
GUESS_PROMPT = 'The character is {name}. Write a magical Akinator-style guess starting with "I\'m thinking of..."'

DEFAULT_BASE_URL = os.environ.get("GUESSER_BASE_URL", "http://localhost:8000/v1")

# --- CONFIGURATION MAP ---
MODELS = {
    "distilgpt2": {"id": "distilgpt2", "temperature": 0.8, "max_tokens": 40},
    "llama": {"id": "Llama-3.3-70B-Instruct", "temperature": 0.8, "max_tokens": 40},
    "qwen": {"id": "Qwen3-Next-80B-A3B-Thinking", "temperature": 0.8, "max_tokens": 40},
}


class RenderFailure(Exception):
    """The generator could not produce a usable guess"""


class GuessResponse(BaseModel):
    guess: str = Field(..., description="One or two sentences starting with \"I'm thinking of...\" and ending with a question mark.")


class TemplateGuessRenderer:
    """
    Deterministic renderer, also the fallback of every other renderer

    Attributes
    ----------
    template : str
        format string with a {name} field
    unknown_entity : str
        text used when the guess has no entity
    """

    def __init__(self, template=GUESS_TEMPLATE, unknown_entity=UNKNOWN_ENTITY):
        self.template = template
        self.unknown_entity = unknown_entity
        self.ready = True

    async def load(self):
        return self.ready

    def display_name(self, entity_name):
        return self.unknown_entity if entity_name is None else entity_name

    def fallback(self, entity_name):
        return self.template.format(name=self.display_name(entity_name))

    async def render_guess(self, entity_name):
        return self.fallback(entity_name)


class LLMGuessRenderer(TemplateGuessRenderer):
    """
    Renderer backed by a text generation model

    Never raises from render_guess(): a RenderFailure is logged and the template text returned.

    Attributes
    ----------
    client : AsyncOpenAI
        the chat completions client
    config : dict
        model preset from MODELS
    timeout : float, optional
        seconds to wait for the generation, None waits forever
    max_attempts : int
        attempts before giving up on the server
    """

    def __init__(self, client=None, model="distilgpt2", base_url=DEFAULT_BASE_URL, timeout=None,
                 max_attempts=3, retry_wait=None, **kwargs):
        super().__init__(**kwargs)

        if model not in MODELS:
            raise ValueError(f"Unknown model preset '{model}', choose from {list(MODELS)}")

        self.config = MODELS[model]
        self.client = client or AsyncOpenAI(base_url=base_url, api_key=os.environ.get("OPENAI_API_KEY", "EMPTY"))
        self.timeout = timeout
        self.max_attempts = max_attempts
        self.retry_wait = retry_wait or wait_random_exponential(multiplier=1, max=10)

        #set by load()
        self.ready = False

    async def load(self):
        """Checks the server is reachable, the template is used until this succeeds"""

        try:
            await self.client.models.list()
        except Exception as e:
            logger.warning(f"Model server unreachable, guesses will use the template: {e}")
            self.ready = False
        else:
            logger.info(f"Model {self.config['id']} ready")
            self.ready = True

        return self.ready

    async def render_guess(self, entity_name):
        if not self.ready:
            return self.fallback(entity_name)

        try:
            if self.timeout is None:
                return await self._generate(entity_name)
            return await asyncio.wait_for(self._generate(entity_name), timeout=self.timeout)

        except Exception as e:
            logger.warning(f"Render failed for {self.display_name(entity_name)!r}, using template: {e}")
            return self.fallback(entity_name)

    async def _generate(self, entity_name):
        prompt = GUESS_PROMPT.format(name=self.display_name(entity_name))

        req_params = {
            "model": self.config["id"],
            "messages": [{"role": "user", "content": prompt}],
            "max_tokens": self.config["max_tokens"],
            "temperature": self.config["temperature"],
            "extra_body": {"guided_json": GuessResponse.model_json_schema()},
        }

        async for attempt in AsyncRetrying(stop=stop_after_attempt(self.max_attempts), wait=self.retry_wait, reraise=True):
            with attempt:
                logger.debug(f"Asking {self.config['id']} (attempt {attempt.retry_state.attempt_number})")
                response = await self.client.chat.completions.create(**req_params)

        raw_content = (response.choices[0].message.content or "").strip()

        return self.clean_guess(raw_content, prompt)

    def clean_guess(self, raw_content, prompt=""):
        """
        Extracts the guess text from the raw model output and makes it a question
        """

        #reasoning models put their thinking before </think>
        if "</think>" in raw_content:
            raw_content = raw_content.split("</think>", 1)[1].strip()

        try:
            text = GuessResponse.model_validate_json(raw_content).guess
        except ValidationError:
            text = raw_content

        #completion style servers echo the prompt
        if prompt and text.startswith(prompt):
            text = text[len(prompt):]

        text = text.strip()
        if not text:
            raise RenderFailure("Model returned an empty guess")

        if not text.endswith("?"):
            text += "?"

        return text
