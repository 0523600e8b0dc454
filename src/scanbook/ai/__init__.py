from scanbook.ai.prompts import AiAction, build_prompt
from scanbook.ai.text_generator import TextGenerator, GeminiTextGenerator
from scanbook.ai.factory import TextGeneratorFactory
from scanbook.ai.assistant import AiAssistant

# Register the built-in generators with the factory
TextGeneratorFactory.register("gemini", GeminiTextGenerator)
