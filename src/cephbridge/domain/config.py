# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#     http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.

from __future__ import annotations

import os
import shlex
from dataclasses import dataclass
from typing import Mapping, Optional

from .errors import ConfigurationError

DEFAULT_BLOCK_SIZE = 1 << 26  # 64 MiB
DEFAULT_READAHEAD = 1
CLIENT_NAME = "CephFSInterface"

# Property names, as a Hadoop-style flat configuration.
MON_ADDR = "fs.ceph.monAddr"
LIB_DIR = "fs.ceph.libDir"
COMMAND_LINE = "fs.ceph.commandLine"
CLIENT_DEBUG = "fs.ceph.clientDebug"
MESSENGER_DEBUG = "fs.ceph.messengerDebug"
BLOCK_SIZE = "fs.ceph.blockSize"
READAHEAD = "fs.ceph.readahead"
DEBUG = "fs.ceph.debug"
DEFAULT_NAME = "fs.default.name"

ENV_KEYS = {
    MON_ADDR: "CEPHBRIDGE_MON_ADDR",
    LIB_DIR: "CEPHBRIDGE_LIB_DIR",
    COMMAND_LINE: "CEPHBRIDGE_COMMAND_LINE",
    CLIENT_DEBUG: "CEPHBRIDGE_CLIENT_DEBUG",
    MESSENGER_DEBUG: "CEPHBRIDGE_MESSENGER_DEBUG",
    BLOCK_SIZE: "CEPHBRIDGE_BLOCK_SIZE",
    READAHEAD: "CEPHBRIDGE_READAHEAD",
    DEBUG: "CEPHBRIDGE_DEBUG",
    DEFAULT_NAME: "CEPHBRIDGE_DEFAULT_NAME",
}

_MON_FLAGS = ("-m", "--mon-host", "--mon_host")
_CONF_FLAGS = ("-c", "--conf")


def _parse_int(conf: Mapping[str, str], key: str, default: int) -> int:
    raw = conf.get(key)
    if raw is None or str(raw).strip() == "":
        return default
    try:
        return int(raw)
    except (TypeError, ValueError) as e:
        raise ConfigurationError(f"{key} must be an integer, got {raw!r}") from e


@dataclass(frozen=True)
class BridgeConfig:
    """
    Startup configuration for the filesystem.

    Only `mon_addr` / `command_line`, the debug levels and `readahead` reach the
    native client, through the argument string built by `startup_arguments()`.
    `lib_dir` is carried for loaders that need it and is not read here.
    """
    mon_addr: Optional[str] = None
    lib_dir: Optional[str] = None
    command_line: str = ""
    client_debug: Optional[str] = None
    messenger_debug: Optional[str] = None
    block_size: int = DEFAULT_BLOCK_SIZE
    readahead: int = DEFAULT_READAHEAD
    debug: bool = False
    default_name: Optional[str] = None

    @classmethod
    def from_mapping(cls, conf: Mapping[str, str]) -> BridgeConfig:
        return cls(
            mon_addr=conf.get(MON_ADDR) or None,
            lib_dir=conf.get(LIB_DIR) or None,
            command_line=conf.get(COMMAND_LINE) or "",
            client_debug=conf.get(CLIENT_DEBUG) or None,
            messenger_debug=conf.get(MESSENGER_DEBUG) or None,
            block_size=_parse_int(conf, BLOCK_SIZE, DEFAULT_BLOCK_SIZE),
            readahead=_parse_int(conf, READAHEAD, DEFAULT_READAHEAD),
            debug=str(conf.get(DEBUG, "false")).strip().lower() == "true",
            default_name=conf.get(DEFAULT_NAME) or None,
        )

    @classmethod
    def from_env(cls) -> BridgeConfig:
        conf = {}
        for key, env in ENV_KEYS.items():
            value = os.getenv(env)
            if value is not None:
                conf[key] = value
        return cls.from_mapping(conf)

    def startup_arguments(self) -> str:
        """
        Build the native startup string. Order matters: passthrough first,
        then client debug, messenger debug, monitor, and readahead last.

        Raises:
            ConfigurationError: if neither a monitor address nor a config file
            flag ends up in the string.
        """
        args = [CLIENT_NAME]
        if self.command_line:
            args.append(self.command_line.strip())
        if self.client_debug is not None:
            args += ["--debug_client", str(self.client_debug)]
        if self.messenger_debug is not None:
            args += ["--debug_ms", str(self.messenger_debug)]
        if self.mon_addr is not None:
            args += ["-m", self.mon_addr]
        args.append(f"--client-readahead-max-periods={self.readahead}")

        arguments = " ".join(args)
        if not has_monitor_or_conf(arguments):
            raise ConfigurationError(
                "You must specify a Ceph monitor address or config file",
                operation="initialize",
            )
        return arguments


def has_monitor_or_conf(arguments: str) -> bool:
    try:
        tokens = shlex.split(arguments)
    except ValueError as e:
        raise ConfigurationError(f"Unparseable command line: {e}") from e
    for tok in tokens:
        name = tok.split("=", 1)[0]
        if name in _MON_FLAGS or name in _CONF_FLAGS:
            return True
    return False
