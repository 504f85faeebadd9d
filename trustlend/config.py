"""Configuration management using Pydantic Settings"""

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Service configuration loaded from environment variables"""

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    # Service
    service_name: str = "trustlend-engine"
    log_level: str = "INFO"

    # Active parameter set
    parameter_version: str = "v1.0.0"
    base_score: int = 50

    # Servicing (simulated time)
    installment_interval_seconds: int = 10
    late_tolerance_seconds: int = 30

    # Loss absorption
    mutual_fund_available_micro: int = 1_000_000_000  # 1,000 units

    # Fraud heuristics
    wallet_age_threshold_hours: float = 24.0
    stake_withdrawal_window_minutes: float = 10.0

    # Approval thresholds
    min_approval_score: int = 20
    min_supporters: int = 2


settings = Settings()
