"""Integration service configuration.

The persisted configuration is a JSON document with one section per server
(LeanKit and the target system) and a list of board mappings. Credentials
can be kept out of the file and supplied through the environment (or a
.env file):

- TARGET_USER / TARGET_PASSWORD
- LEANKIT_USER / LEANKIT_PASSWORD
"""

import json
import os
from datetime import datetime
from pathlib import Path
from typing import List, Optional, Union

from dotenv import load_dotenv
from pydantic import BaseModel, Field

from core.mapping.board_mapping import BoardMapping
from core.observability.logging import get_logger

logger = get_logger(__name__)

DEFAULT_POLLING_FREQUENCY_MS = 60000
DEFAULT_EARLIEST_SYNC_DATE = datetime(2013, 1, 1)


class ConfigBaseModel(BaseModel):
    """Base model for persisted service configuration."""

    class Config:
        populate_by_name = True


class ServerConfiguration(ConfigBaseModel):
    """Connection details for one server (LeanKit or a target system).

    Attributes:
        type: Connector type for target servers (e.g. "TFS")
        protocol: "http" or "https"
        host: Host name, or a full collection URL
        user: User name (or empty for token auth)
        password: Password or personal access token
        url: Optional full URL, used instead of protocol + host when set
    """
    type: Optional[str] = Field(None, alias="Type")
    protocol: str = Field("https", alias="Protocol")
    host: Optional[str] = Field(None, alias="Host")
    user: Optional[str] = Field(None, alias="User")
    password: Optional[str] = Field(None, alias="Password", repr=False)
    url: Optional[str] = Field(None, alias="Url")

    def apply_env(self, prefix: str) -> None:
        """Override credentials from {prefix}_USER / {prefix}_PASSWORD."""
        user = os.getenv(f"{prefix}_USER")
        password = os.getenv(f"{prefix}_PASSWORD")
        if user:
            self.user = user
        if password:
            self.password = password

    def summary(self) -> str:
        masked = "********" if self.password else ""
        return "\n".join([
            f"     Type     : {self.type or ''}",
            f"     Protocol : {self.protocol}",
            f"     Host     : {self.host or ''}",
            f"     Url      : {self.url or ''}",
            f"     User     : {self.user or ''}",
            f"     Password : {masked}",
        ])


class Configuration(ConfigBaseModel):
    """Top-level configuration of the integration service."""
    polling_frequency: int = Field(DEFAULT_POLLING_FREQUENCY_MS, alias="PollingFrequency", gt=0)
    earliest_sync_date: datetime = Field(DEFAULT_EARLIEST_SYNC_DATE, alias="EarliestSyncDate")
    local_storage_path: Optional[str] = Field(None, alias="LocalStoragePath")
    create_target_items: bool = Field(False, alias="CreateTargetItems")
    leankit: ServerConfiguration = Field(default_factory=ServerConfiguration, alias="LeanKit")
    target: ServerConfiguration = Field(default_factory=ServerConfiguration, alias="Target")
    mappings: List[BoardMapping] = Field(default_factory=list, alias="Mappings")

    def get_mapping(self, board_id: int) -> Optional[BoardMapping]:
        """Find the mapping for a LeanKit board."""
        for mapping in self.mappings:
            if mapping.board_id == board_id:
                return mapping
        return None

    def summary(self) -> str:
        """Readable dump of the configuration, credentials masked."""
        lines = [
            "",
            f"PollingFrequency :        {self.polling_frequency}",
            f"LocalStoragePath :        {self.local_storage_path or ''}",
            f"EarliestSyncDate :        {self.earliest_sync_date.isoformat()}",
            "LeanKit :                 ",
            self.leankit.summary(),
            "Target :                  ",
            self.target.summary(),
            "Mappings :                ",
        ]
        for mapping in self.mappings:
            lines.append(mapping.summary())
            lines.append("")
        return "\n".join(lines)


def load_configuration(
    path: Union[str, Path],
    env_file: Optional[Union[str, Path]] = None,
) -> Configuration:
    """Load and validate the service configuration.

    Args:
        path: Path to the JSON configuration file
        env_file: Optional .env file with credential overrides

    Returns:
        Validated Configuration

    Raises:
        FileNotFoundError: If the configuration file does not exist
        pydantic.ValidationError: If the content does not match the model
    """
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Configuration file not found: {path}")

    if env_file is not None:
        env_path = Path(env_file)
        if env_path.exists():
            load_dotenv(env_path)

    with open(path, "r", encoding="utf-8") as f:
        data = json.load(f)

    config = Configuration.model_validate(data)
    config.target.apply_env("TARGET")
    config.leankit.apply_env("LEANKIT")

    logger.info(f"Loaded configuration from {path} ({len(config.mappings)} board mappings)")
    logger.debug(f"Configuration: {config.summary()}")
    return config
