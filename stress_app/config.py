from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    app_name: str = "Portfolio Stress Tester"
    api_key: str = "change-me"
    log_level: str = "INFO"
    default_base_value: float = 1_000_000.0
    default_scenario: str = "2008_crisis"
    recovery_annual_rate: float = 0.08
    recovery_horizon_months: int = 60
    model_config = SettingsConfigDict(env_file=".env", extra="ignore")


settings = Settings()
