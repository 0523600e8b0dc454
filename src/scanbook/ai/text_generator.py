from abc import ABC, abstractmethod
from typing import Any, Dict, Optional, Sequence

from globalog import LOG
from google import genai
from google.genai import types


class TextGenerator(ABC):
    """
    A hosted text generation model. One prompt in, generated text out.
    """

    @abstractmethod
    def generate(self, prompt: str, images: Sequence[bytes] = ()) -> str:
        """
        Generate text for a prompt.

        Args:
            prompt: The full prompt
            images: JPEG images sent along with the prompt

        Returns:
            str: The generated text
        """
        raise NotImplementedError()


class GeminiTextGenerator(TextGenerator):
    """
    Text generation with Google's Gemini models through the google-genai SDK.
    """

    DEFAULT_MODEL = "gemini-3-flash-preview"

    def __init__(self, config: Optional[Dict[str, Any]] = None) -> None:
        """
        Args:
            config: Optional configuration
                - api_key: Gemini API key (default: GEMINI_API_KEY from the environment)
                - model: Model name
                - client: A preconfigured genai.Client
        """
        self.config = config or {}
        self.model = self.config.get('model') or self.DEFAULT_MODEL
        self._client = self.config.get('client')

    @property
    def client(self) -> genai.Client:
        if self._client is None:
            api_key = self.config.get('api_key')
            self._client = genai.Client(api_key=api_key) if api_key else genai.Client()
        return self._client

    def generate(self, prompt: str, images: Sequence[bytes] = ()) -> str:
        contents: list = [prompt]
        contents.extend(types.Part.from_bytes(data=image, mime_type="image/jpeg") for image in images)
        LOG.debug(f"Sending prompt of {len(prompt)} chars and {len(images)} image(s) to {self.model}")
        response = self.client.models.generate_content(model=self.model, contents=contents)
        return response.text or ""
