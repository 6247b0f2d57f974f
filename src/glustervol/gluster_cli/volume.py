"""gluster command line wrapper.

Runs ``gluster --mode=script --xml volume ...`` and parses the XML
reply. A successful exit with output on stderr is logged, not treated
as a failure.

Reply format:
    <cliOutput>
      <opRet>0</opRet><opErrno>0</opErrno><opErrstr/>
      <volInfo><volumes><volume><name>..</name><id>..</id>...
    </cliOutput>
"""

import asyncio
import logging
import xml.etree.ElementTree as ET

from pydantic import BaseModel

from glustervol.core.errors import GlusterCliError, MalformedResponseError
from glustervol.core.models import VolumeId
from glustervol.logging_schema import LogEvent

logger = logging.getLogger(__name__)


class GlusterVolume(BaseModel):
    """Volume entry from ``volume info``."""

    name: str
    id: VolumeId

    model_config = {"frozen": True}


async def run_gluster(*args: str, binary: str = "gluster") -> ET.Element:
    """Run one gluster command and return the checked XML root.

    Raises:
        GlusterCliError: Non-zero exit, missing binary, or opRet/opErrno set.
        MalformedResponseError: Output is not the expected XML.
    """
    cmd = [binary, "--mode=script", "--xml", *args]
    try:
        proc = await asyncio.create_subprocess_exec(
            *cmd,
            stdout=asyncio.subprocess.PIPE,
            stderr=asyncio.subprocess.PIPE,
        )
    except OSError as e:
        raise GlusterCliError(f"Failed to run {binary}: {e}") from e
    stdout, stderr = await proc.communicate()

    if proc.returncode != 0:
        raise GlusterCliError(stderr.decode(errors="replace").strip())
    if stderr:
        logger.warning(
            "gluster stderr: %s",
            stderr.decode(errors="replace").strip(),
            extra={"event": LogEvent.GLUSTER_STDERR, "args": list(args)},
        )
    return parse_output(stdout)


def parse_output(stdout: bytes) -> ET.Element:
    """Parse a ``cliOutput`` document and check its operation status."""
    try:
        root = ET.fromstring(stdout)
    except ET.ParseError as e:
        raise MalformedResponseError(f"Invalid gluster XML output: {e}") from e

    try:
        op_ret = int(root.findtext("opRet", "0"))
        op_errno = int(root.findtext("opErrno", "0"))
    except ValueError as e:
        raise MalformedResponseError(f"Invalid gluster status: {e}") from e
    if op_ret != 0 or op_errno != 0:
        raise GlusterCliError(root.findtext("opErrstr") or "gluster operation failed")
    return root


def _volume(element: ET.Element) -> GlusterVolume:
    name = element.findtext("name")
    volume_id = element.findtext("id")
    if not name or not volume_id:
        raise MalformedResponseError("gluster volume entry without name or id")
    return GlusterVolume(name=name, id=VolumeId(volume_id))


async def info(binary: str = "gluster") -> list[GlusterVolume]:
    """List all volumes."""
    root = await run_gluster("volume", "info", binary=binary)
    return [_volume(v) for v in root.iterfind("volInfo/volumes/volume")]


async def create(
    name: str,
    replica: int,
    bricks: list[tuple[str, str]],
    force: bool = False,
    binary: str = "gluster",
) -> VolumeId:
    """Create a replicated volume from (host, path) bricks."""
    args = ["volume", "create", name, "replica", str(replica)]
    args.extend(f"{host}:{path}" for host, path in bricks)
    if force:
        args.append("force")
    root = await run_gluster(*args, binary=binary)
    element = root.find("volCreate/volume")
    if element is None:
        element = root.find("volume")
    if element is None:
        raise MalformedResponseError("gluster create output without volume")
    return _volume(element).id


async def start(name: str, binary: str = "gluster") -> None:
    await run_gluster("volume", "start", name, binary=binary)


async def stop(name: str, binary: str = "gluster") -> None:
    await run_gluster("volume", "stop", name, binary=binary)


async def delete(name: str, binary: str = "gluster") -> None:
    await run_gluster("volume", "delete", name, binary=binary)
