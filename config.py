import os


class Settings:
    """Relay configuration, read from the environment.

    Keyword overrides replace the environment value for that attribute.
    """

    def __init__(self, **overrides):
        # Upstream Configuration
        self.GEMINI_API_KEY: str = os.getenv("GEMINI_API_KEY", "")
        self.GEMINI_API_BASE_URL: str = os.getenv(
            "GEMINI_API_BASE_URL", "https://generativelanguage.googleapis.com/v1beta"
        )
        self.GEMINI_MODEL: str = os.getenv("GEMINI_MODEL", "gemini-2.5-flash-preview-05-20")
        self.UPSTREAM_TIMEOUT: float = float(os.getenv("UPSTREAM_TIMEOUT", "30"))

        # Server Configuration
        self.HOST: str = os.getenv("RELAY_HOST", "0.0.0.0")
        self.PORT: int = int(os.getenv("RELAY_PORT", "8080"))

        # Logging Configuration
        self.LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO")

        for name, value in overrides.items():
            if not hasattr(self, name):
                raise AttributeError(f"Unknown setting: {name}")
            setattr(self, name, value)

    @property
    def upstream_url(self) -> str:
        """generateContent endpoint for the configured model, without the key."""
        return f"{self.GEMINI_API_BASE_URL.rstrip('/')}/models/{self.GEMINI_MODEL}:generateContent"


settings = Settings()
