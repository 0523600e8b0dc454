from types import SimpleNamespace
from typing import List, Sequence

import pytest

from scanbook.ai import AiAction, AiAssistant, GeminiTextGenerator, TextGenerator, TextGeneratorFactory, build_prompt
from scanbook.exceptions import AiRequestError


class RecordingGenerator(TextGenerator):
    def __init__(self, reply: str = "generated") -> None:
        self.reply = reply
        self.prompts: List[str] = []
        self.images: List[Sequence[bytes]] = []

    def generate(self, prompt: str, images: Sequence[bytes] = ()) -> str:
        self.prompts.append(prompt)
        self.images.append(images)
        return self.reply


class BrokenGenerator(RecordingGenerator):
    def generate(self, prompt: str, images: Sequence[bytes] = ()) -> str:
        raise ConnectionError("quota exceeded")


def test_prompts_embed_text_and_question() -> None:
    """Test that each action wraps the page text in its template."""
    assert build_prompt(AiAction.SUMMARIZE, "PAGE").endswith("PAGE")
    assert "simple terms" in build_prompt(AiAction.EXPLAIN, "PAGE")
    prompt = build_prompt("answer", "PAGE", "Why?")
    assert '"Why?"' in prompt and prompt.endswith("PAGE")


def test_answer_requires_question() -> None:
    with pytest.raises(ValueError):
        build_prompt(AiAction.ANSWER, "PAGE", "  ")


def test_assistant_forwards_prompt_verbatim() -> None:
    """Test that the assistant sends one prompt and returns the generated text."""
    generator = RecordingGenerator("A short summary")
    assistant = AiAssistant(generator)
    assert assistant.summarize("Some page text") == "A short summary"
    assert assistant.answer("ctx", "What?") == "A short summary"
    assert len(generator.prompts) == 2
    assert "Some page text" in generator.prompts[0]


def test_failures_surface_generic_error() -> None:
    """Test that generator errors become AiRequestError with the generic message."""
    with pytest.raises(AiRequestError) as exc_info:
        AiAssistant(BrokenGenerator()).explain("text")
    assert str(exc_info.value) == AiRequestError.GENERIC_MESSAGE
    assert isinstance(exc_info.value.__cause__, ConnectionError)


def test_empty_reply_is_a_failure() -> None:
    with pytest.raises(AiRequestError):
        AiAssistant(RecordingGenerator("")).summarize("text")


def test_extract_text_sends_image() -> None:
    """Test that OCR requests carry the page image."""
    generator = RecordingGenerator("page text")
    assert AiAssistant(generator).extract_text_from_image(b"\xff\xd8\xffjpeg") == "page text"
    assert generator.images[0] == (b"\xff\xd8\xffjpeg",)


def test_gemini_generator_calls_models_api() -> None:
    """Test the google-genai call made by the Gemini generator."""
    calls = []

    def generate_content(model, contents):
        calls.append((model, contents))
        return SimpleNamespace(text="from gemini")

    client = SimpleNamespace(models=SimpleNamespace(generate_content=generate_content))
    generator = GeminiTextGenerator({"client": client, "model": "gemini-test"})
    assert generator.generate("prompt", [b"\xff\xd8\xffimg"]) == "from gemini"
    model, contents = calls[0]
    assert model == "gemini-test"
    assert contents[0] == "prompt"
    assert len(contents) == 2


def test_factory_creates_registered_generator() -> None:
    generator = TextGeneratorFactory.create("Gemini", model="gemini-x", api_key="key")
    assert isinstance(generator, GeminiTextGenerator)
    assert generator.model == "gemini-x"
    with pytest.raises(ValueError):
        TextGeneratorFactory.create("unknown")
