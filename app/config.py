import os
from dotenv import load_dotenv
from typing import Dict, List, Any
from functools import lru_cache

load_dotenv()

class Settings:
    # Database Settings - SQLite file as default for local development
    DATABASE_URL: str = os.getenv("DATABASE_URL", "sqlite:///./interprep.db")
    DATABASE_ECHO: bool = os.getenv("DATABASE_ECHO", "false").lower() == "true"
    DATABASE_POOL_SIZE: int = int(os.getenv("DATABASE_POOL_SIZE", "10"))
    DATABASE_MAX_OVERFLOW: int = int(os.getenv("DATABASE_MAX_OVERFLOW", "20"))
    DATABASE_POOL_TIMEOUT: int = int(os.getenv("DATABASE_POOL_TIMEOUT", "30"))
    DATABASE_POOL_RECYCLE: int = int(os.getenv("DATABASE_POOL_RECYCLE", "3600"))

    # Identity provider token settings (tokens are issued elsewhere, only verified here)
    IDENTITY_JWT_SECRET: str = os.getenv("IDENTITY_JWT_SECRET", "")
    IDENTITY_JWT_ALGORITHM: str = os.getenv("IDENTITY_JWT_ALGORITHM", "HS256")
    IDENTITY_JWT_ISSUER: str = os.getenv("IDENTITY_JWT_ISSUER", "")
    IDENTITY_JWT_AUDIENCE: str = os.getenv("IDENTITY_JWT_AUDIENCE", "")

    # Groq Settings (OpenAI-compatible endpoint)
    GROQ_API_KEY: str = os.getenv("GROQ_API_KEY", "")
    GROQ_BASE_URL: str = os.getenv("GROQ_BASE_URL", "https://api.groq.com/openai/v1")
    GROQ_MODEL: str = os.getenv("GROQ_MODEL", "llama-3.3-70b-versatile")
    GROQ_FAST_MODEL: str = os.getenv("GROQ_FAST_MODEL", "llama-3.1-8b-instant")

    # Gemini Settings
    GOOGLE_API_KEY: str = os.getenv("GOOGLE_API_KEY", "")
    GEMINI_MODEL: str = os.getenv("GEMINI_MODEL", "gemini-1.5-flash")

    # AI Gateway Settings
    AI_PRIMARY_PROVIDER: str = os.getenv("AI_PRIMARY_PROVIDER", "groq")
    AI_FALLBACK_PROVIDER: str = os.getenv("AI_FALLBACK_PROVIDER", "gemini")
    AI_TEMPERATURE: float = float(os.getenv("AI_TEMPERATURE", "0.7"))
    AI_MAX_TOKENS: int = int(os.getenv("AI_MAX_TOKENS", "1024"))

    # User defaults
    DEFAULT_TIMEZONE: str = os.getenv("DEFAULT_TIMEZONE", "Asia/Dhaka")

    # Resume upload settings
    RESUME_MAX_SIZE_BYTES: int = int(os.getenv("RESUME_MAX_SIZE_BYTES", "5242880"))  # 5MB
    RESUME_ALLOWED_MIME_TYPE: str = "application/pdf"
    RESUME_STORAGE_BASE_URL: str = os.getenv("RESUME_STORAGE_BASE_URL", "https://storage.example.com/resumes")
    RESUME_ANALYSIS_CHAR_LIMIT: int = int(os.getenv("RESUME_ANALYSIS_CHAR_LIMIT", "3000"))

    # Application Settings
    ENVIRONMENT: str = os.getenv("ENVIRONMENT", "development")
    LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO")

    # CORS Configuration
    CORS_ORIGINS: List[str] = os.getenv("CORS_ORIGINS", "http://localhost:3000,https://localhost:3000").split(",")
    CORS_METHODS: List[str] = os.getenv("CORS_METHODS", "GET,POST,PUT,DELETE,OPTIONS").split(",")
    CORS_HEADERS: List[str] = os.getenv("CORS_HEADERS", "Content-Type,Authorization,X-Requested-With").split(",")
    CORS_MAX_AGE: int = int(os.getenv("CORS_MAX_AGE", "86400"))  # 24 hours

    @property
    def cors_config(self) -> Dict[str, Any]:
        """Get CORS configuration."""
        return {
            "allow_origins": self.CORS_ORIGINS,
            "allow_credentials": True,
            "allow_methods": self.CORS_METHODS,
            "allow_headers": self.CORS_HEADERS,
            "max_age": self.CORS_MAX_AGE
        }

    @property
    def configured_providers(self) -> Dict[str, bool]:
        """Get AI provider configuration status at once."""
        return {
            "groq": bool(self.GROQ_API_KEY),
            "gemini": bool(self.GOOGLE_API_KEY)
        }

    def is_provider_configured(self, provider: str) -> bool:
        """Check if a specific AI provider has credentials."""
        return self.configured_providers.get(provider, False)

    def get_groq_config(self) -> Dict[str, Any]:
        """Get Groq provider configuration."""
        return {
            "api_key": self.GROQ_API_KEY,
            "base_url": self.GROQ_BASE_URL,
            "model": self.GROQ_MODEL,
            "fast_model": self.GROQ_FAST_MODEL,
            "temperature": self.AI_TEMPERATURE,
            "max_tokens": self.AI_MAX_TOKENS
        }

    def get_gemini_config(self) -> Dict[str, Any]:
        """Get Gemini provider configuration."""
        return {
            "api_key": self.GOOGLE_API_KEY,
            "model": self.GEMINI_MODEL,
            "temperature": self.AI_TEMPERATURE,
            "max_tokens": self.AI_MAX_TOKENS
        }

    def validate_configuration(self) -> List[str]:
        """Validate configuration and return list of issues."""
        issues = []
        if not self.DATABASE_URL:
            issues.append("DATABASE_URL is not set")
        if not self.IDENTITY_JWT_SECRET:
            issues.append("IDENTITY_JWT_SECRET is not set; every authenticated request will be rejected")
        for provider in (self.AI_PRIMARY_PROVIDER, self.AI_FALLBACK_PROVIDER):
            if provider and provider not in self.configured_providers:
                issues.append(f"Unknown AI provider configured: {provider}")
            elif provider and not self.is_provider_configured(provider):
                issues.append(f"AI provider '{provider}' has no API key")
        return issues

@lru_cache()
def get_settings():
    return Settings()
