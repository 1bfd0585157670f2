from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    app_host: str = "0.0.0.0"
    app_port: int = 8000
    env: str = "development"
    log_level: str = "INFO"

    database_url: str = "sqlite+aiosqlite:///./laundry.db"

    paystack_secret_key: str = ""
    paystack_api_base: str = "https://api.paystack.co"
    paystack_timeout: float = 30.0

    # base URL of the customer-facing app, used for payment callbacks
    app_url: str = "http://localhost:3000"
    currency: str = "NGN"

    # required: startup fails without it
    service_api_key: str

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8")

settings = Settings()
