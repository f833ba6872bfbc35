from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Annotated

from rich.pretty import pprint

from argvest import *

__prog__ = "netapp"


class LogLevel(Enum):
    error = 1
    warning = 2
    info = 3


@dataclass(frozen=True)
class Options:
    config_file: Annotated[Path, Opt(help="the configuration file")]
    bind_address: Annotated[str | None, Opt(help="bind address of the service", value_help="address")] = None
    log_level: Annotated[LogLevel | None, Opt(help="logger level", value_help="level")] = None
    verbose: Annotated[bool | None, Opt(help="logged data verbose mode")] = None
    filenames: Annotated[list[str], Opt(help="file names exposed as services")] = field(default_factory=list)


if __name__ == '__main__':
    pprint(ArgVester.create(Options).harvest(fancy=True))
