"""
Runtime configuration for Lector, read from environment variables.
"""

import os
from dataclasses import dataclass, field
from typing import Dict, Mapping, Optional, Tuple

from .agent import DEFAULT_MAX_STEPS
from .commit import DEFAULT_MAX_LENGTH
from .llm import DEFAULT_PROVIDER
from .report import DEFAULT_FILENAME, DEFAULT_OUTPUT_DIR
from .repository import DEFAULT_EXCLUDES


@dataclass
class LectorConfig:
    """Settings shared by the HTTP service and the review agent"""
    llm_provider: str = DEFAULT_PROVIDER
    llm_model_id: Optional[str] = None
    llm_api_key: Optional[str] = None
    max_steps: int = DEFAULT_MAX_STEPS
    commit_max_length: int = DEFAULT_MAX_LENGTH
    report_filename: str = DEFAULT_FILENAME
    output_dir: str = DEFAULT_OUTPUT_DIR
    include_metadata: bool = True
    exclude_patterns: Tuple[str, ...] = field(default_factory=lambda: DEFAULT_EXCLUDES)
    host: str = "127.0.0.1"
    port: int = 8000

    @classmethod
    def from_env(cls, env_dict: Optional[Mapping[str, str]] = None) -> "LectorConfig":
        """Create config from environment variables (os.environ by default)"""
        env: Mapping[str, str] = os.environ if env_dict is None else env_dict

        def get_bool(key: str, default: bool) -> bool:
            val = env.get(key, str(default)).lower()
            return val in ("true", "1", "yes")

        def get_int(key: str, default: int) -> int:
            try:
                value = int(env.get(key, str(default)))
            except ValueError:
                return default
            return value if value > 0 else default

        def get_list(key: str, default: Tuple[str, ...]) -> Tuple[str, ...]:
            raw = env.get(key)
            if raw is None:
                return default
            return tuple(item.strip() for item in raw.split(",") if item.strip())

        return cls(
            llm_provider=env.get("LLM_PROVIDER", DEFAULT_PROVIDER).lower(),
            llm_model_id=env.get("LLM_MODEL_ID") or None,
            llm_api_key=env.get("LLM_API_KEY") or None,
            max_steps=get_int("LECTOR_MAX_STEPS", DEFAULT_MAX_STEPS),
            commit_max_length=get_int("LECTOR_COMMIT_MAX_LENGTH", DEFAULT_MAX_LENGTH),
            report_filename=env.get("LECTOR_REPORT_FILENAME") or DEFAULT_FILENAME,
            output_dir=env.get("LECTOR_OUTPUT_DIR") or DEFAULT_OUTPUT_DIR,
            include_metadata=get_bool("LECTOR_INCLUDE_METADATA", True),
            exclude_patterns=get_list("LECTOR_EXCLUDE", DEFAULT_EXCLUDES),
            host=env.get("LECTOR_HOST", "127.0.0.1"),
            port=get_int("LECTOR_PORT", 8000),
        )

    def to_dict(self) -> Dict[str, object]:
        """Settings safe to expose (the API key is never included)"""
        return {
            "llm_provider": self.llm_provider,
            "llm_model_id": self.llm_model_id,
            "max_steps": self.max_steps,
            "commit_max_length": self.commit_max_length,
            "report_filename": self.report_filename,
            "output_dir": self.output_dir,
            "include_metadata": self.include_metadata,
            "exclude_patterns": list(self.exclude_patterns),
        }
