"""Configuration for the text edit engine."""

import os
from dataclasses import dataclass, fields
from typing import Any, Dict

import yaml


@dataclass(frozen=True)
class TextEditConfig:
    """Tunable limits for matching and patch generation."""

    similarity_threshold: float = 0.6
    similarity_max_needle_chars: int = 1000
    similarity_max_needle_lines: int = 20
    similarity_max_document_lines: int = 1000
    patch_context_lines: int = 3

    def __post_init__(self) -> None:
        if not 0.0 <= self.similarity_threshold <= 1.0:
            raise ValueError(f"similarity_threshold must be between 0.0 and 1.0, got {self.similarity_threshold}")

        for name in (
            'similarity_max_needle_chars',
            'similarity_max_needle_lines',
            'similarity_max_document_lines',
            'patch_context_lines'
        ):
            if getattr(self, name) < 0:
                raise ValueError(f"{name} must not be negative, got {getattr(self, name)}")

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'TextEditConfig':
        """
        Create a configuration from a dictionary, ignoring unknown keys.

        Args:
            data: Configuration values

        Returns:
            TextEditConfig instance
        """
        known = {f.name for f in fields(cls)}
        return cls(**{key: value for key, value in data.items() if key in known})

    @classmethod
    def load_from_file(cls, config_path: str) -> 'TextEditConfig':
        """
        Load configuration from a YAML file.

        Args:
            config_path: Path to the YAML file

        Returns:
            TextEditConfig instance

        Raises:
            FileNotFoundError: If the file does not exist
            ValueError: If the file does not contain a mapping or holds invalid values
        """
        if not os.path.exists(config_path):
            raise FileNotFoundError(f"Configuration file not found: {config_path}")

        with open(config_path, 'r', encoding='utf-8') as f:
            data = yaml.safe_load(f)

        if data is None:
            return cls()

        if not isinstance(data, dict):
            raise ValueError(f"Configuration file must contain a mapping: {config_path}")

        return cls.from_dict(data)

    def save_to_file(self, config_path: str) -> None:
        """Save configuration to a YAML file."""
        data = {f.name: getattr(self, f.name) for f in fields(self)}

        with open(config_path, 'w', encoding='utf-8') as f:
            yaml.dump(data, f, default_flow_style=False, sort_keys=True)
