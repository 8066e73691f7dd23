from pydantic import BaseModel


class DatabaseParams(BaseModel):
    url: str
    echo: bool = False


class ServerConfig(BaseModel):
    database: DatabaseParams
    log_level: str = "INFO"
    # Consumed by whatever schedules periodic saves (outside the sync core)
    autosave_interval_s: int = 300
