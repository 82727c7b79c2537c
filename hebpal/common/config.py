from __future__ import annotations
import os
from dataclasses import dataclass
from dotenv import load_dotenv

load_dotenv()


@dataclass
class Settings:
    OLLAMA_HOST: str = os.getenv('OLLAMA_HOST', 'http://127.0.0.1:11434')
    LLM_MODEL: str = os.getenv('LLM_MODEL') or os.getenv('OLLAMA_MODEL', 'qwen2.5:3b')
    OLLAMA_API_KEY: str = os.getenv('OLLAMA_API_KEY', '')
    LLM_TIMEOUT: float = float(os.getenv('LLM_TIMEOUT', '120'))
    PALINDROME_MIN_LENGTH: int = int(os.getenv('PALINDROME_MIN_LENGTH', '3'))
    PALINDROME_MAX_LENGTH: int = int(os.getenv('PALINDROME_MAX_LENGTH', '50'))
    LOG_LEVEL: str = os.getenv('LOG_LEVEL', 'WARNING')


settings = Settings()

__all__ = ["Settings", "settings"]
