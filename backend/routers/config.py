"""Configuration API endpoints"""

from __future__ import annotations

from typing import Any, Literal

from fastapi import APIRouter, HTTPException
from pydantic import BaseModel, Field

from services.config_manager import ConfigManager

router = APIRouter()


class DiffSettings(BaseModel):
    """Diff engine settings"""

    warnTableCells: int | None = Field(default=None, gt=0)


class SessionSettings(BaseModel):
    """Session manager settings"""

    maxSessions: int | None = Field(default=None, ge=1)


class LoggingSettings(BaseModel):
    """Logging settings"""

    level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] | None = None


class ConfigUpdateRequest(BaseModel):
    """Request to update configuration"""

    diff: DiffSettings | None = None
    sessions: SessionSettings | None = None
    logging: LoggingSettings | None = None


class ConfigResponse(BaseModel):
    """Configuration response"""

    server: dict
    diff: dict
    sessions: dict
    logging: dict


@router.get("", response_model=ConfigResponse)
async def get_config() -> ConfigResponse:
    """Get current configuration"""
    config = ConfigManager.get_instance().get_config()

    return ConfigResponse(
        server=config.get("server", {}),
        diff=config.get("diff", {}),
        sessions=config.get("sessions", {}),
        logging=config.get("logging", {}),
    )


@router.put("")
async def update_config(request: ConfigUpdateRequest) -> dict[str, Any]:
    """Update configuration. Takes effect for sessions opened after a restart."""
    config_manager = ConfigManager.get_instance()
    current_config = config_manager.get_config()

    # Update only provided fields
    for section in ("diff", "sessions", "logging"):
        settings = getattr(request, section)
        if settings is None:
            continue
        updates = settings.model_dump(exclude_none=True)
        if updates:
            current_config[section] = {**current_config.get(section, {}), **updates}

    try:
        config_manager.save_config(current_config)
    except RuntimeError as e:
        raise HTTPException(status_code=500, detail=str(e))

    return {"status": "success", "message": "Configuration updated"}
