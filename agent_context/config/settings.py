from pydantic_settings import BaseSettings, SettingsConfigDict
from pydantic import BaseModel, Field
import yaml
import os

class ContextConfig(BaseModel):
    context_path: str = ".context"           # local install root
    source_directory: str = "context"        # directory a package ships its fragments in
    metadata_filename: str = "index.yaml"    # per-package sidecar inside the install root

class TargetConfig(BaseModel):
    path: str = "AGENT.md"
    anchor_heading: str = "Agent"
    anchor_level: int = Field(default=1, ge=1, le=6)
    section_heading: str = "Context"
    section_level: int = Field(default=2, ge=1, le=6)
    provenance: bool = False                 # "Generated on ..." line atop the block

class LoggingConfig(BaseModel):
    level: str = "INFO"
    format: str = "%(asctime)s %(levelname)s %(name)s: %(message)s"

class AppSettings(BaseSettings):
    context: ContextConfig = ContextConfig()
    target: TargetConfig = TargetConfig()
    logging: LoggingConfig = LoggingConfig()

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_prefix="AGENT_CONTEXT_",
        env_nested_delimiter="__",
        extra="ignore"
    )

def load_settings(config_path: str | None = None) -> AppSettings:
    """Loads settings from a YAML file and applies env overrides for unset sections."""

    paths_to_try = [
        config_path,
        "agent_context.yaml",
        "config/config.yaml",
    ]

    yaml_data = {}
    for path in paths_to_try:
        if path and os.path.exists(path):
            with open(path, "r", encoding="utf-8") as f:
                yaml_data = yaml.safe_load(f) or {}
            break

    # Only sections present in the YAML are passed explicitly, the rest come from env/defaults
    sections = {
        "context": ContextConfig,
        "target": TargetConfig,
        "logging": LoggingConfig,
    }
    overrides = {
        name: model(**yaml_data[name])
        for name, model in sections.items()
        if isinstance(yaml_data.get(name), dict)
    }
    return AppSettings(**overrides)

# Global settings instance
settings = load_settings()
