from pydantic import BaseModel, ConfigDict, Field
from enum import Enum
from typing import List


class ServerDataMode(str, Enum):
    daily = "daily"  # one pool per UTC day, evicted by retention
    single = "single"  # one pool kept forever


class ConfigModel(BaseModel):
    """Public view of the server configuration served by /config."""

    model_config = ConfigDict(populate_by_name=True)

    days_to_keep: int = Field(alias="daysToKeep")
    server_data_mode: ServerDataMode = Field(alias="serverDataMode")


class KeyFileModel(BaseModel):
    """Key artifact kept by the client. The server has no record of it."""

    model_config = ConfigDict(populate_by_name=True)

    date: str
    file_extension: str = Field(alias="fileExtension")
    positions: List[int]
