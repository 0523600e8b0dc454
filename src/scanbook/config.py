"""
Configuration dataclass for scanbook.
"""

import json
import os
from dataclasses import dataclass, field, fields
from pathlib import Path
from typing import Optional, Dict, Any


def _default_library_dir() -> str:
    return str(Path.home() / ".scanbook")


@dataclass
class ScanbookConfig:
    """
    Configuration for the scan pipeline, the persistence bridge and the AI bridge.
    """
    api_base_url: str = "http://localhost:3000"
    library_dir: str = field(default_factory=_default_library_dir)
    request_timeout: float = 10.0
    gemini_model: str = "gemini-3-flash-preview"
    gemini_api_key: Optional[str] = field(default_factory=lambda: os.environ.get("GEMINI_API_KEY"))
    capture_max_dimension: int = 1600
    capture_quality: float = 0.8
    assembly_max_dimension: int = 1200
    assembly_quality: float = 0.75
    page_size: str = "A4"

    @classmethod
    def from_file(cls, config_path: str) -> "ScanbookConfig":
        """
        Load configuration from a JSON file. Unknown keys are rejected.

        Args:
            config_path: Path to the JSON configuration file

        Returns:
            ScanbookConfig: Loaded configuration
        """
        with open(config_path, "r") as f:
            config_data = json.load(f)

        known = {f.name for f in fields(cls)}
        unknown = set(config_data) - known
        if unknown:
            raise ValueError(f"Unknown configuration keys: {', '.join(sorted(unknown))}")

        return cls(**config_data)

    @classmethod
    def from_env(cls, env_var: str = "SCANBOOK_CONFIG") -> "ScanbookConfig":
        """
        Load configuration from the file named by an environment variable,
        or return the defaults if the variable is not set.
        """
        config_path = os.environ.get(env_var)
        if not config_path:
            return cls()

        return cls.from_file(config_path)

    def to_dict(self) -> Dict[str, Any]:
        """
        Convert configuration to a dictionary. The API key is left out.
        """
        config_dict = {
            "api_base_url": self.api_base_url,
            "library_dir": self.library_dir,
            "request_timeout": self.request_timeout,
            "gemini_model": self.gemini_model,
            "capture_max_dimension": self.capture_max_dimension,
            "capture_quality": self.capture_quality,
            "assembly_max_dimension": self.assembly_max_dimension,
            "assembly_quality": self.assembly_quality,
            "page_size": self.page_size,
        }
        return config_dict
