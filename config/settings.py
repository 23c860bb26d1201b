# config/settings.py
import os
import sys
from dotenv import load_dotenv
from pydantic import ValidationError, Field
from pydantic_settings import BaseSettings
from util.constants import VerificationPolicy
from util.enums import Environment, PassPolicy


if os.getenv("APP_ENV", Environment.DEV) == Environment.DEV:
    load_dotenv()


class Settings(BaseSettings):
    # App
    APP_ENV: str = Field(..., validation_alias="APP_ENV")
    HOST: str = Field(default="0.0.0.0", validation_alias="HOST")
    PORT: int = Field(default=3001, validation_alias="PORT")

    # CORS
    ALLOWED_ORIGIN: str = Field(..., validation_alias="ALLOWED_ORIGIN")

    # Database
    DATABASE_URL: str = Field(..., validation_alias="DATABASE_URL")
    DB_CREATE_TABLES: bool = Field(default=False, validation_alias="DB_CREATE_TABLES")
    DB_ECHO: bool = Field(default=False, validation_alias="DB_ECHO")

    # LLM toggle & active provider (read once; never switched by requests)
    ENABLE_LLM: bool = Field(default=True, validation_alias="ENABLE_LLM")
    LLM_PROVIDER: str = Field(default="openai", validation_alias="LLM_PROVIDER")
    LLM_HTTP_TIMEOUT_SECONDS: float = Field(
        default=30.0, validation_alias="LLM_HTTP_TIMEOUT_SECONDS"
    )
    DEFAULT_TEMPERATURE: float = 0.7
    DEFAULT_MAX_TOKENS: int = 1000
    DICTIONARY_LLM_TEMPERATURE: float = 0.3
    DICTIONARY_LLM_MAX_TOKENS: int = 300

    # OpenAI Settings
    OPENAI_API_KEY: str | None = Field(default=None, validation_alias="OPENAI_API_KEY")
    OPENAI_BASE_URL: str = "https://api.openai.com/v1"
    OPENAI_DEFAULT_MODEL: str = Field(
        default="gpt-4o-mini", validation_alias="OPENAI_DEFAULT_MODEL"
    )
    OPENAI_MODELS: list[str] = [
        "gpt-4o-mini",
        "gpt-4o",
        "gpt-3.5-turbo",
        "gpt-4-turbo",
        "gpt-4",
    ]

    # Anthropic Settings
    ANTHROPIC_API_KEY: str | None = Field(
        default=None, validation_alias="ANTHROPIC_API_KEY"
    )
    ANTHROPIC_BASE_URL: str = "https://api.anthropic.com/v1"
    ANTHROPIC_DEFAULT_MODEL: str = Field(
        default="claude-3-sonnet-20240229", validation_alias="ANTHROPIC_DEFAULT_MODEL"
    )
    ANTHROPIC_VERSION: str = "2023-06-01"
    ANTHROPIC_MODELS: list[str] = [
        "claude-3-sonnet-20240229",
        "claude-3-opus-20240229",
        "claude-3-haiku-20240307",
    ]

    # Gemini Settings
    GEMINI_API_KEY: str | None = Field(default=None, validation_alias="GEMINI_API_KEY")
    GEMINI_BASE_URL: str = "https://generativelanguage.googleapis.com/v1beta"
    GEMINI_DEFAULT_MODEL: str = Field(
        default="gemini-2.5-flash", validation_alias="GEMINI_DEFAULT_MODEL"
    )
    GEMINI_MODELS: list[str] = [
        "gemini-2.5-flash",
        "gemini-2.5-pro",
        "gemini-2.0-flash",
        "gemini-1.5-flash",
        "gemini-1.5-pro",
    ]

    # Ollama Settings (local, no credential)
    OLLAMA_BASE_URL: str = Field(
        default="http://localhost:11434", validation_alias="OLLAMA_BASE_URL"
    )
    OLLAMA_DEFAULT_MODEL: str = "llama2"
    OLLAMA_MODELS: list[str] = ["llama2", "codellama", "mistral"]

    # Verification harness
    VERIFY_ACCURACY_THRESHOLD: int = Field(
        default=VerificationPolicy.ACCURACY_THRESHOLD,
        ge=0,
        le=100,
        validation_alias="VERIFY_ACCURACY_THRESHOLD",
    )
    VERIFY_PASS_POLICY: PassPolicy = Field(
        default=PassPolicy.MEANING, validation_alias="VERIFY_PASS_POLICY"
    )
    VERIFY_REQUEST_DELAY_SECONDS: float = Field(
        default=1.0, ge=0, validation_alias="VERIFY_REQUEST_DELAY_SECONDS"
    )
    VERIFY_TEMPERATURE: float = 0.3
    VERIFY_MAX_TOKENS: int = 300
    VERIFY_TEST_CASES_FILE: str = "test-data/llm-test-cases.json"
    VERIFY_RESULTS_FILE: str = "test-data/validation-results.json"

    # Logging knobs
    LOGGER_NAME: str = "konkani-dictionary"
    LOG_LEVEL: str = Field(default="INFO", validation_alias="LOG_LEVEL")
    LOG_TO_FILE: bool = Field(default=False, validation_alias="LOG_TO_FILE")
    LOG_DIR: str = Field(default="logs", validation_alias="LOG_DIR")
    LOG_FILE_NAME: str = Field(default="app.log", validation_alias="LOG_FILE_NAME")
    LOG_MAX_BYTES: int = Field(
        default=50 * 1024 * 1024, validation_alias="LOG_MAX_BYTES"
    )
    LOG_BACKUP_COUNT: int = Field(default=5, validation_alias="LOG_BACKUP_COUNT")

    # Prompts
    DEFAULT_SYSTEM_PROMPT: str = "You are a helpful AI assistant."

    DICTIONARY_SYSTEM_PROMPT: str = (
        "You are a Konkani language expert helping users search a Konkani-English "
        "dictionary. Provide helpful summaries and suggestions based on search results."
    )

    DICTIONARY_USER_PROMPT: str = (
        'User searched for: "{query}"\n\n'
        "Database results:\n{entries}\n\n"
        "Provide a brief summary of these results and suggest related words "
        "they might be interested in."
    )

    VERIFY_SYSTEM_PROMPT: str = (
        "You are a Konkani-English dictionary assistant. When asked about a Konkani "
        "word or English translation, provide accurate information from the dictionary. "
        "Do not make up or hallucinate words. If you don't know a word, say so."
    )

    VERIFY_USER_PROMPT: str = (
        'What is the meaning of the Konkani word "{word}"? Please provide: '
        "1) Devanagari script, 2) English alphabet spelling, 3) English meaning, "
        "4) Usage example."
    )


try:
    settings = Settings()
except ValidationError as e:
    print("❌ Missing/invalid environment variables:", file=sys.stderr)
    for err in e.errors():
        loc = ".".join(str(x) for x in err.get("loc", []))
        msg = err.get("msg", "")
        print(f" - {loc}: {msg}", file=sys.stderr)
    sys.exit(1)
except Exception as e:
    print(f"❌ Settings initialization failed: {e}", file=sys.stderr)
    sys.exit(1)
