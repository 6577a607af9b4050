"""Environment-driven settings and component factories."""

import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from src.assistant import CommandInterpreter, ModelInterpreter, ModelSuggestionSource, SuggestionGenerator
from src.llm import OpenAIAdapter
from src.tasks import GoogleTasksStore, InMemoryTaskStore, JsonFileTaskStore, TaskStore
from src.tasks.google_auth import TasksAuthenticator
from src.tasks.google_store import DEFAULT_LIST_NAME
from src.tasks.json_store import DEFAULT_TASKS_FILE

logger = logging.getLogger(__name__)

STORE_CHOICES = ("json", "memory", "google")

_FALSE_VALUES = ("0", "false", "no", "off")


def _env_float(name: str, default: float) -> float:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    try:
        return float(raw)
    except ValueError:
        logger.warning("Invalid %s=%r, using default %s", name, raw, default)
        return default


def _env_int(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    try:
        return int(raw)
    except ValueError:
        logger.warning("Invalid %s=%r, using default %s", name, raw, default)
        return default


def _env_path(name: str) -> Optional[Path]:
    raw = os.getenv(name)
    return Path(raw) if raw else None


@dataclass(frozen=True)
class AssistantSettings:
    """Runtime settings for the assistant.

    Attributes:
        openai_api_key: Key for the model-backed path; None disables it.
        model: Chat model name.
        temperature: Sampling temperature for interpretation.
        max_tokens: Completion token cap for interpretation.
        use_model: False forces fallback-only interpretation.
        store: Task store backend, one of STORE_CHOICES.
        tasks_file: JSON task file for the "json" store.
        tasks_list_name: Google Tasks list for the "google" store.
        tasks_credentials_path: OAuth client secrets for the "google" store.
        tasks_token_path: Cached OAuth token for the "google" store.
        tasks_non_interactive: Never open a browser for OAuth.
    """

    openai_api_key: Optional[str] = None
    model: str = OpenAIAdapter.DEFAULT_MODEL
    temperature: float = 0.3
    max_tokens: int = 1000
    use_model: bool = True
    store: str = "json"
    tasks_file: Path = DEFAULT_TASKS_FILE
    tasks_list_name: str = DEFAULT_LIST_NAME
    tasks_credentials_path: Optional[Path] = None
    tasks_token_path: Optional[Path] = None
    tasks_non_interactive: bool = False

    @property
    def model_enabled(self) -> bool:
        """Whether commands go to the completion service first."""
        return self.use_model and bool(self.openai_api_key)

    @classmethod
    def from_env(cls) -> "AssistantSettings":
        """Build settings from environment variables."""
        return cls(
            openai_api_key=os.getenv("OPENAI_API_KEY") or None,
            model=os.getenv("ASSISTANT_MODEL") or OpenAIAdapter.DEFAULT_MODEL,
            temperature=_env_float("ASSISTANT_TEMPERATURE", 0.3),
            max_tokens=_env_int("ASSISTANT_MAX_TOKENS", 1000),
            use_model=os.getenv("ASSISTANT_USE_MODEL", "1").strip().lower() not in _FALSE_VALUES,
            store=(os.getenv("TASK_STORE") or "json").strip().lower(),
            tasks_file=_env_path("TASKS_FILE") or DEFAULT_TASKS_FILE,
            tasks_list_name=os.getenv("TASKS_LIST_NAME") or DEFAULT_LIST_NAME,
            tasks_credentials_path=_env_path("TASKS_CREDENTIALS_PATH"),
            tasks_token_path=_env_path("TASKS_TOKEN_PATH"),
            tasks_non_interactive=bool(os.getenv("TASKS_NON_INTERACTIVE")),
        )


def build_task_store(settings: AssistantSettings) -> TaskStore:
    """Create the task store named by ``settings.store``.

    Raises:
        ValueError: If the store name is unknown.
    """
    if settings.store == "json":
        return JsonFileTaskStore(settings.tasks_file)
    if settings.store == "memory":
        return InMemoryTaskStore()
    if settings.store == "google":
        authenticator = TasksAuthenticator(
            credentials_path=settings.tasks_credentials_path,
            token_path=settings.tasks_token_path,
            interactive=not settings.tasks_non_interactive,
        )
        return GoogleTasksStore(authenticator=authenticator, list_name=settings.tasks_list_name)
    raise ValueError(
        f"Unknown task store {settings.store!r}, expected one of: {', '.join(STORE_CHOICES)}"
    )


def _build_adapter(settings: AssistantSettings) -> OpenAIAdapter:
    return OpenAIAdapter(api_key=settings.openai_api_key, model=settings.model)


def build_interpreter(settings: AssistantSettings) -> CommandInterpreter:
    """Model-first interpreter when a key is configured, fallback-only otherwise."""
    if not settings.model_enabled:
        logger.info("Model interpretation disabled, using local rules only")
        return CommandInterpreter()
    primary = ModelInterpreter(
        adapter=_build_adapter(settings),
        temperature=settings.temperature,
        max_tokens=settings.max_tokens,
    )
    return CommandInterpreter(primary)


def build_suggestion_generator(settings: AssistantSettings) -> SuggestionGenerator:
    if not settings.model_enabled:
        return SuggestionGenerator()
    return SuggestionGenerator(ModelSuggestionSource(adapter=_build_adapter(settings)))
