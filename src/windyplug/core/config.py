"""Configuration management for windyplug."""

import os
import re
import yaml
from pathlib import Path
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field, field_validator
from dotenv import load_dotenv

from .models import OutputFormat


IDENTIFIER_PATTERN = re.compile(r"^[A-Za-z_$][A-Za-z0-9_$]*$")
GLOBAL_PATH_PATTERN = re.compile(r"^[A-Za-z_$][A-Za-z0-9_$]*(\.[A-Za-z_$][A-Za-z0-9_$]*)*$")


class RewriteConfig(BaseModel):
    """Configuration for virtual import rewriting."""
    
    virtual_prefix: str = "@windy/"
    runtime_global: str = "W"
    
    @field_validator('virtual_prefix')
    @classmethod
    def validate_prefix(cls, v: str) -> str:
        if not v or not v.endswith('/'):
            raise ValueError(f"Virtual prefix must be non-empty and end with '/': {v!r}")
        return v
    
    @field_validator('runtime_global')
    @classmethod
    def validate_runtime_global(cls, v: str) -> str:
        if not GLOBAL_PATH_PATTERN.match(v):
            raise ValueError(f"Runtime global must be a JavaScript identifier path: {v!r}")
        return v


class SideConfigSettings(BaseModel):
    """Configuration for locating and injecting the side config file."""
    
    file_stem: str = "pluginConfig"
    extensions: List[str] = Field(default_factory=lambda: [".ts", ".js", ".mjs"])
    binding_name: str = "__pluginConfig"
    encoding: str = "utf-8"
    
    @field_validator('binding_name')
    @classmethod
    def validate_binding_name(cls, v: str) -> str:
        if not IDENTIFIER_PATTERN.match(v):
            raise ValueError(f"Binding name must be a JavaScript identifier: {v!r}")
        return v
    
    @field_validator('extensions')
    @classmethod
    def validate_extensions(cls, v: List[str]) -> List[str]:
        if not v:
            raise ValueError("At least one side config extension is required")
        return [ext if ext.startswith('.') else f".{ext}" for ext in v]


class OutputConfig(BaseModel):
    """Configuration for generated output and reports."""
    
    # Source maps
    sourcemap: bool = False
    hires: bool = True
    include_sources_content: bool = True
    
    # Reporting
    format: OutputFormat = OutputFormat.TEXT
    verbose: bool = False
    quiet: bool = False


class Config(BaseModel):
    """Main configuration class for windyplug."""
    
    # Sub-configurations
    rewrite: RewriteConfig = Field(default_factory=RewriteConfig)
    side_config: SideConfigSettings = Field(default_factory=SideConfigSettings)
    output: OutputConfig = Field(default_factory=OutputConfig)
    
    # Global settings
    log_level: Optional[str] = Field(default=None, validate_default=True)
    log_file: Optional[Path] = None
    
    @field_validator('log_level', mode='before')
    @classmethod
    def load_log_level(cls, v: Optional[str]) -> str:
        """Load log level from environment if not provided."""
        if v is None:
            v = os.getenv('WINDYPLUG_LOG_LEVEL', 'INFO')
        return str(v).upper()
    
    @classmethod
    def load_from_file(cls, config_path: Path) -> "Config":
        """Load configuration from a YAML file or pyproject.toml."""
        if not config_path.exists():
            raise FileNotFoundError(f"Configuration file not found: {config_path}")
        
        if config_path.name == "pyproject.toml":
            return cls.load_from_pyproject(config_path)
        
        with open(config_path, 'r', encoding='utf-8') as f:
            config_data = yaml.safe_load(f) or {}
        
        return cls(**config_data)
    
    @classmethod
    def load_from_dict(cls, config_dict: Dict[str, Any]) -> "Config":
        """Load configuration from dictionary."""
        return cls(**config_dict)
    
    @classmethod
    def get_default_config(cls) -> "Config":
        """Get default configuration."""
        # Load environment variables
        load_dotenv()
        return cls()
    
    @classmethod
    def find_config_file(cls, start_path: Optional[Path] = None) -> Optional[Path]:
        """Find configuration file in current directory or parent directories."""
        if start_path is None:
            start_path = Path.cwd()
        
        config_names = [
            ".windyplug.yaml",
            ".windyplug.yml",
            "windyplug.yaml",
            "windyplug.yml",
            "pyproject.toml"  # Look for [tool.windyplug] section
        ]
        
        current_path = start_path.resolve()
        
        # Search up the directory tree
        while current_path != current_path.parent:
            for config_name in config_names:
                config_file = current_path / config_name
                if config_file.exists():
                    if config_name == "pyproject.toml":
                        if cls._has_windyplug_config(config_file):
                            return config_file
                    else:
                        return config_file
            current_path = current_path.parent
        
        return None
    
    @classmethod
    def _has_windyplug_config(cls, pyproject_path: Path) -> bool:
        """Check if pyproject.toml has a [tool.windyplug] section."""
        try:
            data = cls._read_toml(pyproject_path)
        except (OSError, ValueError):
            return False
        return "tool" in data and "windyplug" in data["tool"]
    
    @staticmethod
    def _read_toml(path: Path) -> Dict[str, Any]:
        try:
            import tomllib
        except ImportError:
            import tomli as tomllib
        
        with open(path, 'rb') as f:
            return tomllib.load(f)
    
    @classmethod
    def load_from_pyproject(cls, pyproject_path: Path) -> "Config":
        """Load configuration from pyproject.toml file."""
        data = cls._read_toml(pyproject_path)
        
        if "tool" not in data or "windyplug" not in data["tool"]:
            raise ValueError("No [tool.windyplug] section found in pyproject.toml")
        
        return cls(**data["tool"]["windyplug"])
    
    def save_to_file(self, config_path: Path) -> None:
        """Save configuration to YAML file."""
        config_path.parent.mkdir(parents=True, exist_ok=True)
        
        config_dict = self._prepare_for_yaml(self.model_dump())
        
        with open(config_path, 'w', encoding='utf-8') as f:
            yaml.dump(config_dict, f, default_flow_style=False, indent=2, sort_keys=False)
    
    def _prepare_for_yaml(self, data: Any) -> Any:
        """Prepare data for YAML serialization."""
        if isinstance(data, dict):
            return {k: self._prepare_for_yaml(v) for k, v in data.items()}
        elif isinstance(data, list):
            return [self._prepare_for_yaml(item) for item in data]
        elif isinstance(data, Path):
            return str(data)
        elif hasattr(data, 'value'):  # Enum
            return data.value
        else:
            return data
    
    def validate_config(self) -> List[str]:
        """Validate configuration and return list of issues."""
        issues = []
        
        if self.log_level not in ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"):
            issues.append(f"Unknown log level: {self.log_level}")
        
        if self.side_config.binding_name == self.rewrite.runtime_global:
            issues.append("Side config binding name must differ from the runtime global")
        
        if self.output.verbose and self.output.quiet:
            issues.append("Verbose and quiet output are mutually exclusive")
        
        if self.log_file and not self.log_file.parent.exists():
            issues.append(f"Log directory does not exist: {self.log_file.parent}")
        
        return issues
    
    def merge_with_cli_args(self, **cli_args) -> "Config":
        """Merge configuration with CLI arguments."""
        config_dict = self.model_dump()
        
        cli_mapping = {
            'verbose': 'output.verbose',
            'quiet': 'output.quiet',
            'format': 'output.format',
            'sourcemap': 'output.sourcemap',
            'hires': 'output.hires',
            'virtual_prefix': 'rewrite.virtual_prefix',
            'runtime_global': 'rewrite.runtime_global',
        }
        
        for cli_key, cli_value in cli_args.items():
            if cli_value is not None and cli_key in cli_mapping:
                config_path = cli_mapping[cli_key].split('.')
                current = config_dict
                
                for path_part in config_path[:-1]:
                    current = current[path_part]
                
                current[config_path[-1]] = cli_value
        
        return Config(**config_dict)
