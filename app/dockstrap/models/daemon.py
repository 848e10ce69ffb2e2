"""Docker daemon configuration document (``/etc/docker/daemon.json``)."""

import json
from typing import Annotated

from pydantic import BaseModel, ConfigDict, Field


class LogOptions(BaseModel):
    """Rotation limits for the json-file log driver."""

    model_config = ConfigDict(extra="forbid", populate_by_name=True)

    max_size: Annotated[str, Field(alias="max-size")] = "100m"
    max_file: Annotated[str, Field(alias="max-file")] = "3"


class Ulimit(BaseModel):
    """A single default ulimit entry."""

    model_config = ConfigDict(extra="forbid")

    Name: str
    Hard: int
    Soft: int


def _default_ulimits() -> dict[str, Ulimit]:
    return {"nofile": Ulimit(Name="nofile", Hard=64000, Soft=64000)}


class DaemonConfig(BaseModel):
    """Fixed-shape daemon configuration written after installation.

    Only the registry mirror list is expected to vary between runs; the
    other fields carry the installer's standard tuning.
    """

    model_config = ConfigDict(extra="forbid", populate_by_name=True)

    registry_mirrors: Annotated[list[str], Field(alias="registry-mirrors")]
    log_driver: Annotated[str, Field(alias="log-driver")] = "json-file"
    log_opts: Annotated[LogOptions, Field(alias="log-opts")] = LogOptions()
    storage_driver: Annotated[str, Field(alias="storage-driver")] = "overlay2"
    default_ulimits: Annotated[
        dict[str, Ulimit],
        Field(alias="default-ulimits", default_factory=_default_ulimits),
    ]
    live_restore: Annotated[bool, Field(alias="live-restore")] = True
    userland_proxy: Annotated[bool, Field(alias="userland-proxy")] = False
    experimental: bool = False
    metrics_addr: Annotated[str, Field(alias="metrics-addr")] = "127.0.0.1:9323"
    max_concurrent_downloads: Annotated[
        int,
        Field(alias="max-concurrent-downloads", ge=1),
    ] = 10

    def to_json(self) -> str:
        """Serialize with daemon.json key names, two-space indented."""
        return json.dumps(self.model_dump(by_alias=True), indent=2) + "\n"
