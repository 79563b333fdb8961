"""
Application configuration via pydantic-settings.

Loads values from .env file with sensible defaults for local development.
Use ``get_settings()`` to obtain the cached singleton instance.
"""

from functools import lru_cache

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Suara application settings loaded from environment / .env file.

    All settings can be overridden via environment variables or a `.env` file.
    Field names map directly to env var names (case-insensitive).

    Attributes:
        stt_provider: Transcription backend ("openai" hosted or "local").
        openai_api_key: Secret for the hosted transcription service.
        transcription_language: Fixed language hint sent with every upload.
        speech_language: BCP-47 tag used by recognition and synthesis.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",  # Silently ignore unrecognized env vars
    )

    # --- Transcription relay ---
    # "openai" forwards uploads to the hosted API, "local" runs faster-whisper
    stt_provider: str = "openai"

    # Hosted transcription (OpenAI) settings
    openai_api_key: str = ""  # Required when stt_provider="openai"
    openai_transcription_model: str = "whisper-1"

    # Local Whisper settings
    whisper_model: str = "base"  # Model size: tiny, base, small, medium, large-v3
    whisper_device: str = "cpu"
    whisper_compute_type: str = "int8"

    transcription_language: str = "id"  # ISO 639-1 hint; Indonesian by default
    transcription_timeout: float = 120.0  # Seconds; 0 disables the bound
    max_upload_mb: int = 25  # Hosted API rejects files above 25 MB
    upload_tmp_dir: str = ""  # Empty = system temp directory

    # --- Application ---
    app_host: str = "0.0.0.0"  # Bind address for the FastAPI server
    app_port: int = 8000
    log_level: str = "INFO"  # Python logging level
    cors_origins: list[str] = [
        "http://localhost:8501",  # Streamlit
        "http://localhost:3000",  # Dev frontend
    ]

    # --- UI ---
    api_base_url: str = "http://localhost:8000"
    api_timeout: float = 120.0

    # --- Speech engines ---
    speech_language: str = "id-ID"
    recognition_continuous: bool = True
    recognition_interim_results: bool = True
    recognition_phrase_time_limit: float = 5.0
    recognition_listen_timeout: float = 1.0
    echo_final_transcript: bool = True  # Speak back the final recognized text
    sample_rate: int = 16000  # Microphone capture rate in Hz


@lru_cache
def get_settings() -> Settings:
    """Return a cached Settings singleton.

    Uses ``functools.lru_cache`` so the .env file is read only once.
    Subsequent calls return the same ``Settings`` instance.

    Returns:
        Settings: The application-wide configuration object.
    """
    return Settings()
