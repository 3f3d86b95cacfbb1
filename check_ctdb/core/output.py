"""Plugin output: severity, message and performance data."""

from dataclasses import dataclass

import nagiosplugin
from nagiosplugin.state import Critical, Ok, ServiceState, Unknown, Warn


@dataclass(frozen=True)
class Measurement:
    """A labelled value rendered as Nagios performance data."""

    label: str
    value: int | float
    uom: str = ""
    warning: nagiosplugin.Range | None = None
    critical: nagiosplugin.Range | None = None
    min: int | float | None = None
    max: int | float | None = None

    def performance(self) -> nagiosplugin.Performance:
        """Convert to a nagiosplugin Performance record."""
        return nagiosplugin.Performance(
            self.label,
            self.value,
            self.uom,
            self.warning,
            self.critical,
            self.min,
            self.max,
        )


class Output:
    """Collects the verdict of one check run and renders it."""

    def __init__(self, name: str = "CTDB", separator: str = " "):
        self.name = name
        self.separator = separator
        self.state: ServiceState = Ok
        self.messages: list[str] = []
        self.measurements: list[Measurement] = []
        self.long_output: list[str] = []
        self._summary: str | None = None
        self._printed: bool = False

    def escalate(self, state: ServiceState, message: str | None = None) -> None:
        """Raise the severity to at least ``state``; never lowers it."""
        self.state = max(self.state, state)
        if message:
            self.messages.append(message)

    def warning(self, message: str) -> None:
        """Record a warning message."""
        self.escalate(Warn, message)

    def critical(self, message: str) -> None:
        """Record a critical message."""
        self.escalate(Critical, message)

    def unknown(self, message: str) -> None:
        """Record a problem that prevents a verdict on the cluster."""
        self.escalate(Unknown, message)

    def add_message(self, message: str) -> None:
        """Append to the message without touching the severity."""
        self.messages.append(message)

    def add_measurement(self, measurement: Measurement) -> None:
        """Append one performance data item."""
        self.measurements.append(measurement)

    def add_long_output(self, text: str) -> None:
        """Append lines shown below the status line."""
        self.long_output.extend(line for line in text.splitlines() if line.strip())

    def set_summary(self, summary: str) -> None:
        """Set the message used when nothing more specific was recorded."""
        self._summary = summary

    @property
    def summary(self) -> str:
        """Get accumulated message or fall back to the default summary."""
        if self.messages:
            return self.separator.join(self.messages)
        if self._summary:
            return self._summary
        return str(self.state)

    @property
    def exit_code(self) -> int:
        """Plugin exit code: 0 ok, 1 warning, 2 critical, 3 unknown."""
        return int(self.state)

    def perfdata(self) -> str:
        """Render all measurements as a perfdata string."""
        return " ".join(str(m.performance()) for m in self.measurements)

    def to_plain(self) -> str:
        """Return the full plugin output as text."""
        line = f"{self.name} {str(self.state).upper()} - {self.summary}"
        perfdata = self.perfdata()
        if perfdata:
            line = f"{line} | {perfdata}"
        return "\n".join([line] + self.long_output)

    def render(self) -> None:
        """Print the plugin output once."""
        if self._printed:
            return
        self._printed = True
        print(self.to_plain())
