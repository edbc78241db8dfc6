from pydantic_settings import BaseSettings, SettingsConfigDict
from pydantic import Field

class Settings(BaseSettings):
	gemini_api_key: str | None = Field(default=None, validation_alias="GEMINI_API_KEY")
	# Provider can be "vertex" (Vertex AI Express) or "ai_studio" (Generative Language API)
	gemini_provider: str = Field(default="ai_studio", validation_alias="GEMINI_PROVIDER")
	gemini_model: str = Field(default="gemini-2.0-flash", validation_alias="GEMINI_MODEL")
	# Optional: model override for the multimodal transcription flow
	gemini_model_transcription: str | None = Field(default=None, validation_alias="GEMINI_MODEL_TRANSCRIPTION")
	# Vertex configuration
	vertex_region: str = Field(default="us-central1", validation_alias="GEMINI_VERTEX_REGION")
	vertex_project: str | None = Field(default=None, validation_alias="GEMINI_VERTEX_PROJECT")

	# Text-to-speech: base64-encoded service account JSON; ADC is used when unset
	google_service_account_base64: str | None = Field(default=None, validation_alias="GOOGLE_SERVICE_ACCOUNT_BASE64")
	tts_default_voice: str = Field(default="en-IN-Standard-A", validation_alias="TTS_DEFAULT_VOICE")
	tts_language_code: str = Field(default="en-US", validation_alias="TTS_LANGUAGE_CODE")

	# Deadline applied to every provider call
	provider_timeout_seconds: float = Field(default=300.0, validation_alias="PROVIDER_TIMEOUT_SECONDS")

	# "development" exposes error details to callers, "production" does not
	app_env: str = Field(default="development", validation_alias="APP_ENV")
	log_level: str = Field(default="INFO", validation_alias="LOG_LEVEL")

	# pydantic-settings v2 style config
	model_config = SettingsConfigDict(env_file=".env", extra="ignore")

	@property
	def is_production(self) -> bool:
		return self.app_env.strip().lower() == "production"

	@property
	def transcription_model(self) -> str:
		return self.gemini_model_transcription or self.gemini_model

settings = Settings()
