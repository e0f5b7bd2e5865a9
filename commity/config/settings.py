"""
Application settings with environment variable support.
"""

from pathlib import Path
from typing import Optional, Literal
import platformdirs
from pydantic import BaseModel, Field
from pydantic_settings import BaseSettings, SettingsConfigDict


APP_NAME = "commity"


class UISettings(BaseModel):
    """User interface configuration."""
    
    use_colors: bool = Field(
        default=True,
        description="Use colored output"
    )
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = Field(
        default="WARNING",
        description="Logging level"
    )


class StorageSettings(BaseModel):
    """Persisted field value configuration."""
    
    enabled: bool = Field(
        default=True,
        description="Remember values of fields marked with 'store' between runs"
    )


class Settings(BaseSettings):
    """Main application settings with environment variable support."""
    
    ui: UISettings = Field(default_factory=UISettings)
    storage: StorageSettings = Field(default_factory=StorageSettings)
    
    config_filename: str = Field(
        default=".commity.yaml",
        description="Per-repository configuration file name"
    )
    global_config_filename: str = Field(
        default="commity.yaml",
        description="Configuration file name inside the user config directory"
    )
    config_dir_override: Optional[Path] = Field(
        default=None,
        validation_alias="COMMITY_CONFIG_DIR",
        description="Use this directory instead of the platform config directory"
    )
    data_dir_override: Optional[Path] = Field(
        default=None,
        validation_alias="COMMITY_DATA_DIR",
        description="Use this directory instead of the platform data directory"
    )
    
    model_config = SettingsConfigDict(
        env_prefix="COMMITY_",
        env_nested_delimiter="__",
        case_sensitive=False,
        extra="ignore",
        populate_by_name=True,
    )
    
    @property
    def config_dir(self) -> Path:
        """Directory holding the global configuration file."""
        if self.config_dir_override:
            return self.config_dir_override.expanduser()
        return platformdirs.user_config_path(APP_NAME)
    
    @property
    def data_dir(self) -> Path:
        """Per-user application data directory."""
        if self.data_dir_override:
            return self.data_dir_override.expanduser()
        return platformdirs.user_data_path(APP_NAME)
    
    @property
    def cache_dir(self) -> Path:
        """Directory holding one persisted value file per repository."""
        return self.data_dir / "cache"
    
    @property
    def global_config_path(self) -> Path:
        return self.config_dir / self.global_config_filename
    
    @property
    def log_file(self) -> Path:
        """Get the log file path."""
        return self.data_dir / "commity.log"
