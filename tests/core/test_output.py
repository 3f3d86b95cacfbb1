"""Tests for plugin output."""

import nagiosplugin
from nagiosplugin.state import Critical, Ok, Unknown, Warn

from check_ctdb.core.output import Measurement, Output


class TestMeasurement:
    """Tests for Measurement."""

    def test_plain_value(self):
        """Label and value only."""
        assert str(Measurement("total", 4).performance()) == "total=4"

    def test_with_bounds(self):
        """Warning, critical, min and max are rendered in order."""
        zero = nagiosplugin.Range("0")
        measurement = Measurement("error", 1, warning=zero, critical=zero, min=0, max=4)

        assert str(measurement.performance()) == "error=1;0;0;0;4"

    def test_unit(self):
        """Unit follows the value."""
        assert str(Measurement("time", 0.5, uom="s", min=0).performance()) == "time=0.5s;;;0"


class TestOutput:
    """Tests for Output."""

    def test_starts_ok(self):
        """Fresh output is OK with exit code 0."""
        output = Output()
        assert output.state == Ok
        assert output.exit_code == 0

    def test_escalate_takes_maximum(self):
        """Severity only goes up."""
        output = Output()
        output.escalate(Critical)
        output.escalate(Warn)
        output.escalate(Ok)

        assert output.state == Critical
        assert output.exit_code == 2

    def test_warning_records_message(self):
        """warning() raises severity and keeps the message."""
        output = Output()
        output.warning("script failed")

        assert output.state == Warn
        assert output.messages == ["script failed"]
        assert output.exit_code == 1

    def test_unknown_exit_code(self):
        """UNKNOWN maps to 3."""
        output = Output()
        output.unknown("bad option")
        assert output.exit_code == 3
        assert output.state == Unknown

    def test_add_message_keeps_state(self):
        """Messages alone do not change severity."""
        output = Output()
        output.add_message("1 missing nodes.")
        assert output.state == Ok

    def test_summary_joins_messages(self):
        """Messages are joined with the separator."""
        output = Output(separator=";;")
        output.add_message("a")
        output.add_message("b")
        assert output.summary == "a;;b"

    def test_summary_falls_back_to_default(self):
        """Default summary is used when nothing was recorded."""
        output = Output()
        output.set_summary("3 of 3 nodes responding")
        assert output.summary == "3 of 3 nodes responding"

    def test_summary_without_anything(self):
        """Without summary the state name is used."""
        assert Output().summary == "ok"

    def test_to_plain(self):
        """Status line with perfdata."""
        output = Output()
        output.warning("50.samba (ERROR=1): smbd down")
        output.add_measurement(Measurement("ok", 2, min=0, max=3))
        output.add_measurement(Measurement("total", 3, min=0))

        assert output.to_plain() == (
            "CTDB WARNING - 50.samba (ERROR=1): smbd down | ok=2;;;0;3 total=3;;;0"
        )

    def test_to_plain_without_perfdata(self):
        """No pipe when there are no measurements."""
        output = Output()
        output.unknown("Unknown info 'foo'")
        assert output.to_plain() == "CTDB UNKNOWN - Unknown info 'foo'"

    def test_long_output(self):
        """Long output lines follow the status line."""
        output = Output()
        output.add_long_output("first\n\nsecond\n")
        assert output.to_plain().splitlines()[1:] == ["first", "second"]

    def test_render_prints_once(self, capsys):
        """render() only prints the first time."""
        output = Output()
        output.set_summary("all good")
        output.render()
        output.render()

        captured = capsys.readouterr()
        assert captured.out == "CTDB OK - all good\n"
