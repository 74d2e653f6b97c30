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

import dataclasses
import json
import logging
import shutil
from contextlib import contextmanager
from pathlib import Path
from typing import Iterator, Optional

import typer

from ..adapters.native.local_client import LocalNativeClient
from ..domain.config import DEBUG, DEFAULT_BLOCK_SIZE, BLOCK_SIZE, MON_ADDR
from ..domain.errors import CephBridgeError
from ..domain.models import CreateFlag, FileStatus
from ..services import CephFileSystem

from ..logging_config import setup_logging

setup_logging()

app = typer.Typer(help="cephbridge CLI - filesystem operations against a Ceph-style cluster")

logger = logging.getLogger(__name__)

ROOT_OPTION = typer.Option(
    ...,
    "--root",
    exists=True,
    file_okay=False,
    dir_okay=True,
    resolve_path=True,
    help="Local directory holding the emulated cluster",
)
MON_OPTION = typer.Option("localhost:6789", "--mon", help="Monitor address")
BLOCK_OPTION = typer.Option(DEFAULT_BLOCK_SIZE, "--block-size", help="Block size in bytes")
VERBOSE_OPTION = typer.Option(False, "--verbose", help="Trace filesystem calls")


@contextmanager
def _wire(
    root: Path, mon: str, block_size: int = DEFAULT_BLOCK_SIZE, verbose: bool = False
) -> Iterator[CephFileSystem]:
    """
    Composition root: LocalNativeClient + CephFileSystem, initialized for the
    duration of one command. Domain errors exit with status 1.
    """
    if verbose:
        logging.getLogger().setLevel(logging.DEBUG)

    fs = CephFileSystem(LocalNativeClient(root))
    conf = {
        MON_ADDR: mon,
        BLOCK_SIZE: str(block_size),
        DEBUG: "true" if verbose else "false",
    }
    try:
        fs.initialize(f"ceph://{mon}/", conf)
        with fs:
            yield fs
    except CephBridgeError as e:
        logger.debug("command failed: %r", e)
        typer.echo(f"error: {e}", err=True)
        raise typer.Exit(code=1)


def _line(status: FileStatus) -> str:
    kind = "d" if status.is_dir else "-"
    return f"{kind}{status.permission:04o} {status.replication} {status.size:>12} {status.path}"


@app.command("ls")
def ls(
    path: str = typer.Argument("/", help="Cluster path"),
    recursive: bool = typer.Option(False, "--recursive", "-R", help="List everything below"),
    root: Path = ROOT_OPTION,
    mon: str = MON_OPTION,
    verbose: bool = VERBOSE_OPTION,
):
    """List a directory (or a single file)."""
    with _wire(root, mon, verbose=verbose) as fs:
        if recursive:
            for status in fs.walk(path):
                typer.echo(_line(status))
            return
        statuses = fs.list_status(path)
        if statuses is None:
            statuses = [fs.get_file_status(path)]
        for status in statuses:
            typer.echo(_line(status))


@app.command("stat")
def stat(
    path: str = typer.Argument(..., help="Cluster path"),
    root: Path = ROOT_OPTION,
    mon: str = MON_OPTION,
    verbose: bool = VERBOSE_OPTION,
):
    """Print the status record of a path as JSON."""
    with _wire(root, mon, verbose=verbose) as fs:
        status = fs.get_file_status(path)
        typer.echo(json.dumps(dataclasses.asdict(status), indent=2))


@app.command("mkdir")
def mkdir(
    path: str = typer.Argument(..., help="Directory to create, with parents"),
    mode: str = typer.Option("755", "--mode", help="Octal permission bits"),
    root: Path = ROOT_OPTION,
    mon: str = MON_OPTION,
    verbose: bool = VERBOSE_OPTION,
):
    """Create a directory and any missing parents."""
    try:
        perm = int(mode, 8)
    except ValueError:
        raise typer.BadParameter("--mode must be octal, e.g. 755")
    with _wire(root, mon, verbose=verbose) as fs:
        if not fs.mkdirs(path, perm):
            typer.echo(f"error: could not create {path}", err=True)
            raise typer.Exit(code=1)


@app.command("put")
def put(
    source: Path = typer.Argument(..., exists=True, dir_okay=False, help="Local file"),
    dest: str = typer.Argument(..., help="Cluster path"),
    overwrite: bool = typer.Option(False, "--overwrite", help="Replace an existing file"),
    block_size: int = BLOCK_OPTION,
    root: Path = ROOT_OPTION,
    mon: str = MON_OPTION,
    verbose: bool = VERBOSE_OPTION,
):
    """Copy a local file into the cluster."""
    flags = CreateFlag.CREATE | CreateFlag.OVERWRITE if overwrite else CreateFlag.CREATE
    with _wire(root, mon, block_size, verbose) as fs:
        with open(source, "rb") as src, fs.create(dest, flags=flags) as out:
            shutil.copyfileobj(src, out)
        typer.echo(f"Wrote {fs.statistics.bytes_written} bytes to {dest}")


@app.command("cat")
def cat(
    path: str = typer.Argument(..., help="Cluster file"),
    root: Path = ROOT_OPTION,
    mon: str = MON_OPTION,
    verbose: bool = VERBOSE_OPTION,
):
    """Write a cluster file to stdout."""
    with _wire(root, mon, verbose=verbose) as fs:
        with fs.open(path) as stream:
            data = stream.read()
        typer.echo(data.decode("utf-8", errors="replace"), nl=False)


@app.command("rm")
def rm(
    path: str = typer.Argument(..., help="Cluster path"),
    recursive: bool = typer.Option(False, "--recursive", "-r", help="Delete directories"),
    root: Path = ROOT_OPTION,
    mon: str = MON_OPTION,
    verbose: bool = VERBOSE_OPTION,
):
    """Delete a file, or a directory tree with -r."""
    with _wire(root, mon, verbose=verbose) as fs:
        if not fs.delete(path, recursive=recursive):
            typer.echo(f"error: could not delete {path}", err=True)
            raise typer.Exit(code=1)


@app.command("mv")
def mv(
    src: str = typer.Argument(...),
    dst: str = typer.Argument(...),
    root: Path = ROOT_OPTION,
    mon: str = MON_OPTION,
    verbose: bool = VERBOSE_OPTION,
):
    """Rename a file or directory."""
    with _wire(root, mon, verbose=verbose) as fs:
        if not fs.rename(src, dst):
            typer.echo(f"error: could not rename {src} to {dst}", err=True)
            raise typer.Exit(code=1)


@app.command("df")
def df(
    root: Path = ROOT_OPTION,
    mon: str = MON_OPTION,
    verbose: bool = VERBOSE_OPTION,
):
    """Show capacity, used and remaining bytes."""
    with _wire(root, mon, verbose=verbose) as fs:
        st = fs.get_status()
        typer.echo(f"capacity={st.capacity} used={st.used} remaining={st.remaining}")


@app.command("locations")
def locations(
    path: str = typer.Argument(..., help="Cluster file"),
    start: int = typer.Option(0, "--start", help="First byte of interest"),
    length: Optional[int] = typer.Option(
        None, "--length", help="Range length; defaults to the file size"
    ),
    block_size: int = BLOCK_OPTION,
    root: Path = ROOT_OPTION,
    mon: str = MON_OPTION,
    verbose: bool = VERBOSE_OPTION,
):
    """Show which hosts serve each block of a file."""
    with _wire(root, mon, block_size, verbose) as fs:
        status = fs.get_file_status(path)
        span = status.size if length is None else length
        for loc in fs.get_file_block_locations(status, start, span):
            typer.echo(f"{loc.offset}\t{loc.length}\t{','.join(loc.hosts)}")
