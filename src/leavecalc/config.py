from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", env_prefix="LEAVECALC_", extra="ignore")

    app_name: str = "LeaveCalc"
    debug: bool = False
    log_level: str = "INFO"

    # Organization leave policy used when a request does not say otherwise
    exclude_holidays_from_leave: bool = True
    exclude_weekends_from_leave: bool = True


settings = Settings()
