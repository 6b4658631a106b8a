"""Configuration management for git-workflow."""
from pathlib import Path
from datetime import datetime
from typing import Optional
from pydantic import BaseModel, Field, field_validator
import tomli
import tomli_w
import os
import re

DEFAULT_CONFIG_FILENAME = ".gitworkflow.toml"
CONFIG_SECTION = "gitworkflow"

STRING_FIELDS = ["remote_name", "base_branch", "log_level", "log_file", "log_directory"]
BOOL_FIELDS = ["abort_on_conflict", "always_log"]


def _sanitize_string(value: str) -> str:
    """Sanitize string values to prevent injection attacks."""
    if not value:
        return value

    # Remove control characters and null bytes
    value = re.sub(r'[\x00-\x08\x0B\x0C\x0E-\x1F\x7F]', '', value)

    # Drop everything from the first shell metacharacter on
    value = re.split(r'[;&|`$()]', value)[0]

    if len(value) > 1000:
        value = value[:1000]

    return value.strip()


def _is_safe_path(path: str) -> bool:
    """Check if a path is safe (relative, no traversal)."""
    if not path:
        return False

    if '..' in path or path.startswith('/') or '\\' in path:
        return False

    if os.path.isabs(path):
        return False

    return True


class Config(BaseModel):
    """Configuration settings for git-workflow.

    Values come from, in increasing priority: defaults, ``GIT_WORKFLOW_*``
    environment variables, ``.gitworkflow.toml`` and command line options.
    """

    remote_name: str = Field(
        default="origin",
        description="Name of the remote repository (e.g., origin, upstream)"
    )

    base_branch: Optional[str] = Field(
        default=None,
        description="Branch to rebase onto; auto-detected (develop, then the remote default) when unset"
    )

    abort_on_conflict: bool = Field(
        default=False,
        description="Abort rebases that stop on conflicts instead of leaving them for manual resolution"
    )

    log_level: str = Field(
        default="INFO",
        description="Log file threshold (DEBUG, INFO, WARN or ERROR)"
    )

    always_log: bool = Field(
        default=False,
        description="Whether to always write a timestamped log file"
    )

    log_file: Optional[str] = Field(
        default=None,
        description="Path to log file (if not using automatic log file generation)"
    )

    log_directory: str = Field(
        default=".gitworkflow",
        description="Directory for automatically generated log files"
    )

    @field_validator("log_level")
    @classmethod
    def _check_log_level(cls, value: str) -> str:
        value = value.strip().upper()
        if value == "WARNING":
            value = "WARN"
        if value not in ("DEBUG", "INFO", "WARN", "ERROR"):
            raise ValueError(f"Unknown log level: {value}")
        return value

    def __init__(self, **data):
        """Initialize config with environment variable support and sanitization."""
        env_data = {}

        for field_name in STRING_FIELDS + BOOL_FIELDS:
            env_var = f"GIT_WORKFLOW_{field_name.upper()}"
            if env_var not in os.environ:
                continue
            value = os.environ[env_var]

            if field_name in BOOL_FIELDS:
                value = value.lower() in ['true', '1', 'yes', 'on']
            else:
                value = _sanitize_string(value)

            env_data[field_name] = value

        merged_data = {**env_data, **data}

        super().__init__(**merged_data)

    @classmethod
    def load(cls, repo_path: Path) -> 'Config':
        """Load configuration from the config file.

        Args:
            repo_path: Path to the git repository

        Returns:
            Config: Configuration object with values from file or defaults
        """
        config_path = repo_path / DEFAULT_CONFIG_FILENAME

        if not config_path.exists():
            return cls()

        try:
            with config_path.open('rb') as f:
                config_data = tomli.load(f)

            # Settings may live at the top level or under a [gitworkflow] table
            if isinstance(config_data.get(CONFIG_SECTION), dict):
                config_data = config_data[CONFIG_SECTION]

            for key in STRING_FIELDS:
                if isinstance(config_data.get(key), str):
                    config_data[key] = _sanitize_string(config_data[key])

            for key in ('log_file', 'log_directory'):
                if config_data.get(key) and not _is_safe_path(config_data[key]):
                    print(f"Warning: Unsafe {key} path '{config_data[key]}', using default")
                    del config_data[key]

            return cls(**config_data)
        except Exception as e:
            # If there's any error reading the config, use defaults
            print(f"Warning: Error reading config file: {e}")
            return cls()

    def save(self, repo_path: Path) -> Path:
        """Save configuration to the config file.

        Args:
            repo_path: Path to the git repository

        Returns:
            Path: Location of the written file
        """
        config_path = repo_path / DEFAULT_CONFIG_FILENAME

        # TOML has no null, so unset values are left out
        config_dict = {k: v for k, v in self.model_dump().items() if v is not None}

        if config_dict.get('log_file') and not _is_safe_path(config_dict['log_file']):
            print(f"Warning: Unsafe log file path '{config_dict['log_file']}', not saving")
            del config_dict['log_file']

        with config_path.open('wb') as f:
            tomli_w.dump(config_dict, f)
        return config_path

    def get_log_file(self) -> Optional[Path]:
        """Get the path to the log file.

        If always_log is True, generates a timestamped log file name inside
        log_directory. Otherwise, returns the configured log_file path if set.

        Returns:
            Optional[Path]: Path to the log file, or None if logging is disabled
        """
        if self.always_log:
            timestamp = datetime.now().strftime("%Y-%m-%d_%H-%M-%S")
            directory = Path(self.log_directory) if _is_safe_path(self.log_directory) else Path(".")
            return directory / f"gwf_log-{timestamp}.log"
        elif self.log_file:
            if _is_safe_path(self.log_file):
                return Path(self.log_file)
            else:
                print(f"Warning: Unsafe log file path '{self.log_file}', using default")
                return None
        return None
