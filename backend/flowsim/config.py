"""Application configuration via environment variables."""
from pathlib import Path
from pydantic_settings import BaseSettings

PROJECT_ROOT = Path(__file__).resolve().parent.parent.parent


class Settings(BaseSettings):
    app_name: str = "FlowSim"
    debug: bool = True
    host: str = "0.0.0.0"
    port: int = 8000
    log_level: str = "INFO"
    graphs_dir: Path = PROJECT_ROOT / "data" / "graphs"
    cors_origins: list[str] = ["http://localhost:5173", "http://localhost:3000"]
    # Multiplier on simulated node durations; 0 makes runs instant
    time_scale: float = 1.0
    message_dismiss_ms: int = 3000

    model_config = {"env_prefix": "FLOWSIM_"}


settings = Settings()
settings.graphs_dir.mkdir(parents=True, exist_ok=True)
