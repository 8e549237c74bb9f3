"""
Configuration for the passive JavaScript scanning pipeline.
Defaults are tuned for low-noise passive scanning; the CLI overrides fields directly.
"""

from dataclasses import dataclass, field


DEFAULT_USER_AGENT = (
    'Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 '
    '(KHTML, like Gecko) Chrome/120.0.0.0 Safari/537.36'
)


@dataclass
class FetchConfig:
    timeout: float = 10.0
    user_agent: str = DEFAULT_USER_AGENT
    max_file_size: int = 5 * 1024 * 1024


@dataclass
class DetectionConfig:
    min_inline_script_length: int = 100
    min_secret_length: int = 8
    min_endpoint_length: int = 5


@dataclass
class Config:
    output_dir: str = "jshunter_output"
    enabled: bool = True
    fetch: FetchConfig = field(default_factory=FetchConfig)
    detection: DetectionConfig = field(default_factory=DetectionConfig)


def get_default_config() -> Config:
    return Config()
