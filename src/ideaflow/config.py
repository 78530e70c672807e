"""ideaflow configuration management."""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path

import yaml

from ideaflow.core.workflow import CommentPolicy, resolve_policy


@dataclass
class Config:
    """ideaflow configuration."""

    config_path: Path = field(default_factory=lambda: Path.home() / ".ideaflow")
    log_level: str = "INFO"
    comment_policy: str = CommentPolicy.REJECTION.value

    # Field limits
    comment_max_length: int = 5000
    title_max_length: int = 255
    category_max_length: int = 50

    # Name of the env var holding the token signing secret
    jwt_secret_env: str = "IDEAFLOW_JWT_SECRET"

    @classmethod
    def load(cls, config_path: Path | None = None) -> Config:
        """Load config from defaults, then YAML file, then env vars."""
        config = cls()

        if config_path:
            config.config_path = config_path

        env_path = os.environ.get("IDEAFLOW_HOME")
        if env_path:
            config.config_path = Path(env_path)

        config_file = config.config_path / "config.yaml"
        if config_file.exists():
            with open(config_file) as f:
                data = yaml.safe_load(f) or {}
            for key, value in data.items():
                if key == "config_path" or not hasattr(config, key):
                    continue
                expected_type = type(getattr(config, key))
                setattr(config, key, expected_type(value))

        env_log = os.environ.get("IDEAFLOW_LOG_LEVEL")
        if env_log:
            config.log_level = env_log

        env_policy = os.environ.get("IDEAFLOW_COMMENT_POLICY")
        if env_policy:
            config.comment_policy = env_policy

        return config

    @property
    def policy(self) -> CommentPolicy:
        """The configured comment policy, falling back to the default."""
        return resolve_policy(self.comment_policy)

    @property
    def jwt_secret(self) -> str | None:
        return os.environ.get(self.jwt_secret_env)

    def save(self) -> None:
        """Save current config to YAML."""
        self.config_path.mkdir(parents=True, exist_ok=True)
        config_file = self.config_path / "config.yaml"
        data = {
            "log_level": self.log_level,
            "comment_policy": self.comment_policy,
            "comment_max_length": self.comment_max_length,
            "title_max_length": self.title_max_length,
            "category_max_length": self.category_max_length,
            "jwt_secret_env": self.jwt_secret_env,
        }
        with open(config_file, "w") as f:
            yaml.dump(data, f, default_flow_style=False)
