from typing import Dict, Type

from scanbook.ai.text_generator import TextGenerator


class TextGeneratorFactory:
    """
    Registry of text generator implementations, created by name.
    """

    _registered: Dict[str, Type[TextGenerator]] = {}

    @classmethod
    def register(cls, name: str, generator_class: Type[TextGenerator]) -> None:
        cls._registered[name.lower()] = generator_class

    @classmethod
    def create(cls, name: str, **kwargs) -> TextGenerator:
        """
        Create an instance of the named generator.

        Raises:
            ValueError: If no generator is registered under that name
        """
        generator_class = cls._registered.get(name.lower())
        if not generator_class:
            registered = ", ".join(cls._registered.keys())
            raise ValueError(f"Text generator '{name}' not found. Available implementations: {registered}")

        return generator_class(kwargs)
