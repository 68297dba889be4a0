from pydantic_settings import BaseSettings

class Settings(BaseSettings):
    # License Server Configuration
    LICENSE_API_URL: str = "https://api.licensechain.app"
    LICENSE_API_PATH: str = "/client"
    LICENSE_API_TIMEOUT: int = 30

    # Application Credential
    APP_NAME: str = ""
    OWNER_ID: str = ""
    APP_SECRET: str = ""

    # Webhooks
    WEBHOOK_SECRET: str = ""  # Falls back to APP_SECRET when empty
    WEBHOOK_SIGNATURE_HEADER: str = "X-LicenseChain-Signature"

    # Retry
    RETRY_MAX_ATTEMPTS: int = 3
    RETRY_INITIAL_DELAY: float = 1.0  # seconds, doubled after each failure

    # Handshake
    ENCRYPTION_KEY_LENGTH: int = 32

    # Service
    SERVICE_VERSION: str = "1.0.0"

    # Logging
    LOG_LEVEL: str = "INFO"
    LOG_FORMAT: str = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"

    class Config:
        env_file = ".env"

    @property
    def webhook_secret(self) -> str:
        return self.WEBHOOK_SECRET or self.APP_SECRET

settings = Settings()

def get_settings() -> Settings:
    return settings
