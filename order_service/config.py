from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    app_name: str = "Order Service"
    log_level: str = "INFO"

    # Currency formatting (Babel locale identifier + ISO 4217 code)
    currency_locale: str = "pt_BR"
    currency_code: str = "BRL"

    class Config:
        env_file = ".env"
        extra = "ignore"


settings = Settings()
