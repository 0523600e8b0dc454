from typing import Optional

from globalog import LOG

from scanbook.ai.prompts import EXTRACT_TEXT_PROMPT, AiAction, build_prompt
from scanbook.ai.text_generator import TextGenerator
from scanbook.exceptions import AiRequestError


class AiAssistant:
    """
    Reading help over extracted page text: summaries, explanations and answers.
    Every failure surfaces as AiRequestError with a generic message; nothing is retried.
    """

    def __init__(self, generator: TextGenerator) -> None:
        self.generator = generator

    def run(self, action: AiAction, text: str, question: Optional[str] = None) -> str:
        """
        Args:
            action: What to do with the text
            text: Page text, e.g. from DocumentViewer.page_text
            question: Required for AiAction.ANSWER

        Raises:
            ValueError: If an answer is requested without a question
            AiRequestError: If generation fails
        """
        prompt = build_prompt(action, text, question or "")
        return self._generate(prompt, action=AiAction(action).value)

    def summarize(self, text: str) -> str:
        return self.run(AiAction.SUMMARIZE, text)

    def explain(self, text: str) -> str:
        return self.run(AiAction.EXPLAIN, text)

    def answer(self, text: str, question: str) -> str:
        return self.run(AiAction.ANSWER, text, question)

    def extract_text_from_image(self, image_data: bytes) -> str:
        """Transcribe the text of a page image, keeping its layout where possible."""
        return self._generate(EXTRACT_TEXT_PROMPT, action="extract", images=(image_data,))

    def _generate(self, prompt: str, action: str, images: tuple = ()) -> str:
        try:
            text = self.generator.generate(prompt, images)
        except Exception as e:
            LOG.error(f"AI {action} request failed", exc_info=e)
            raise AiRequestError() from e
        if not text:
            LOG.error(f"AI {action} request returned no text")
            raise AiRequestError()
        return text
