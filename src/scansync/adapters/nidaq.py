"""NI-DAQmx digital line adapters.

On-demand (software-timed) digital input and output tasks built with the
``nidaqmx`` package. One channel is created per physical line
(``LineGrouping.CHAN_PER_LINE``) so that a single read returns one level
per line, in the order the lines were configured.

Error policy:
- Anything that prevents acquiring the task (nidaqmx not installed, driver
  library missing, device absent, task creation failure) is raised as
  DeviceUnavailable, which the adapter factory recovers from by emulating.
- DaqError raised by a read or write on an open task becomes DriverError.
- DaqWarning issued by the driver is downgraded to a logged warning.

Example:
    >>> adapter = NIDAQInputAdapter(["Dev1/port0/line0", "Dev1/port0/line1"])
    >>> adapter.read()
    array([ True, False])
    >>> adapter.close()
"""

from contextlib import contextmanager
import logging
from typing import Iterator, List, Sequence
import warnings

import numpy as np

from ..exceptions import DeviceUnavailable, DriverError
from .base import InputAdapter, OutputAdapter

try:
    import nidaqmx
    import nidaqmx.system
    from nidaqmx.constants import LineGrouping
    from nidaqmx.errors import DaqError, DaqWarning

    _NIDAQMX_AVAILABLE = True
except ImportError:
    _NIDAQMX_AVAILABLE = False

__all__ = ["NIDAQInputAdapter", "NIDAQOutputAdapter", "detect_devices", "device_name"]

logger = logging.getLogger(__name__)


def device_name(line: str) -> str:
    """Device part of a physical line name ('/Dev1/port0/line0' -> 'Dev1')."""
    return line.strip("/").split("/")[0]


def detect_devices() -> List[str]:
    """List the names of NI-DAQmx devices on this machine.

    Returns an empty list when nidaqmx or the NI driver is not installed.
    """
    if not _NIDAQMX_AVAILABLE:
        logger.debug("nidaqmx not installed, no devices detected")
        return []

    try:
        system = nidaqmx.system.System.local()
        return [dev.name for dev in system.devices]
    except (nidaqmx.errors.Error, OSError) as e:
        logger.debug(f"NI-DAQmx driver not reachable: {e}")
        return []


@contextmanager
def _driver_call(action: str) -> Iterator[None]:
    """Translate driver errors to DriverError and log driver warnings."""
    with warnings.catch_warnings(record=True) as caught:
        warnings.simplefilter("always", DaqWarning)
        try:
            yield
        except DaqError as e:
            raise DriverError(f"NI-DAQmx {action} failed: {e}", code=e.error_code) from e

    for warning in caught:
        if issubclass(warning.category, DaqWarning):
            logger.warning(f"NI-DAQmx {action} warning: {warning.message}")
        else:
            warnings.warn_explicit(warning.message, warning.category, warning.filename, warning.lineno)


def _open_task(lines: Sequence[str], direction: str):
    """Create and start a digital task with one channel per line.

    Raises:
        DeviceUnavailable: nidaqmx missing, device absent or task creation failed
    """
    if not _NIDAQMX_AVAILABLE:
        raise DeviceUnavailable("nidaqmx is not installed")
    if not lines:
        raise DeviceUnavailable("No lines configured")

    available = {name.lower() for name in detect_devices()}
    wanted = {device_name(line).lower() for line in lines}
    missing = wanted - available
    if missing:
        raise DeviceUnavailable(f"NI-DAQmx device(s) not found: {sorted(missing)} (available: {sorted(available)})")

    task = None
    try:
        task = nidaqmx.Task()
        for line in lines:
            if direction == "input":
                task.di_channels.add_di_chan(line, line_grouping=LineGrouping.CHAN_PER_LINE)
            else:
                task.do_channels.add_do_chan(line, line_grouping=LineGrouping.CHAN_PER_LINE)
        task.start()
    except (nidaqmx.errors.Error, OSError) as e:
        if task is not None:
            task.close()
        raise DeviceUnavailable(f"Failed to create NI-DAQmx {direction} task on {list(lines)}: {e}") from e

    return task


class NIDAQInputAdapter(InputAdapter):
    """On-demand NI-DAQmx digital input task."""

    emulated = False

    def __init__(self, lines: Sequence[str]):
        super().__init__(len(lines))
        self.lines = list(lines)
        self.task = _open_task(self.lines, "input")
        logger.info(f"Opened NI-DAQmx input task on {len(self.lines)} line(s)")

    def read(self) -> np.ndarray:
        if self.closed:
            raise DriverError("Read on a released NI-DAQmx input task")

        with _driver_call("read"):
            data = self.task.read()

        if isinstance(data, bool):
            return np.array([data])
        return np.asarray(data, dtype=bool)

    def close(self) -> None:
        if self.closed:
            return
        self.closed = True
        with _driver_call("stop"):
            try:
                self.task.stop()
            finally:
                self.task.close()
        logger.info("Released NI-DAQmx input task")


class NIDAQOutputAdapter(OutputAdapter):
    """On-demand NI-DAQmx digital output task."""

    emulated = False

    def __init__(self, lines: Sequence[str]):
        super().__init__(len(lines))
        self.lines = list(lines)
        self.task = _open_task(self.lines, "output")
        logger.info(f"Opened NI-DAQmx output task on {len(self.lines)} line(s)")

    def write(self, levels: Sequence[bool]) -> None:
        if self.closed:
            raise DriverError("Write on a released NI-DAQmx output task")

        data = [bool(level) for level in levels]
        if len(data) != self.channel_count:
            raise DriverError(f"Expected {self.channel_count} output levels, got {len(data)}")

        with _driver_call("write"):
            # single-line tasks take a scalar sample
            self.task.write(data[0] if self.channel_count == 1 else data)

    def close(self) -> None:
        if self.closed:
            return
        self.closed = True
        with _driver_call("stop"):
            try:
                self.task.stop()
            finally:
                self.task.close()
        logger.info("Released NI-DAQmx output task")
