"""
End-to-end tests for the run_sync command-line script.
"""

import json
import logging
from pathlib import Path
from unittest.mock import Mock

import pytest

import run_sync
from registry_sync.models.schema_version import VersionedReport


REGISTRY_PAGE = """
<html><body><main>
  <div></div><div></div>
  <div><table>
    <tr><th>Data</th><th></th><th></th></tr>
    <tr><td><a href="lesson/1">02.09.2024 08.00</a> curs</td><td></td>
        <td><a href="lesson/1/edit">edit</a></td></tr>
    <tr><td><a href="lesson/2">04.09.2024 15.00</a> seminar</td><td></td>
        <td><a href="lesson/2/edit">edit</a></td></tr>
  </table></div>
</main></body></html>
"""


@pytest.fixture
def inputs(tmp_path):
    """Schedule and registry files for two study weeks."""
    lessons = tmp_path / "lessons.json"
    lessons.write_text(json.dumps({"lessons": [
        {"id": "algebra-curs", "day_of_week": 0, "time_slot": 0, "kind": "curs",
         "course": "Algebra", "group": "IA2201"},
        {"id": "algebra-lab", "day_of_week": 1, "time_slot": 2, "kind": "lab",
         "parity": "even", "course": "Algebra", "group": "IA2201"},
        {"id": "physics", "day_of_week": 2, "time_slot": 1, "course": "Physics"},
    ]}), encoding="utf-8")

    weeks = tmp_path / "weeks.csv"
    weeks.write_text(
        "monday_date,is_odd_week\n2024-09-02,true\n2024-09-09,false\n",
        encoding="utf-8"
    )

    existing = tmp_path / "algebra.html"
    existing.write_text(REGISTRY_PAGE, encoding="utf-8")

    return tmp_path, [
        "--lessons", str(lessons),
        "--weeks", str(weeks),
        "--existing", str(existing),
        "--course", "Algebra",
        "--output-dir", str(tmp_path / "out"),
    ]


def load_report(output_dir):
    reports = list(output_dir.glob("sync_report_*.json"))
    assert len(reports) == 1
    with open(reports[0], encoding="utf-8") as f:
        return VersionedReport.from_dict(json.load(f))


class TestRunSync:
    """Test cases for run_sync.main."""

    def test_plan_and_report(self, inputs, capsys):
        tmp_path, argv = inputs

        exit_code = run_sync.main(argv)

        assert exit_code == 0
        assert "SYNCHRONIZATION PLAN" in capsys.readouterr().out

        report = load_report(tmp_path / "out" / "reports")
        types = [c["type"] for c in report.data["commands"]]
        # Mon 2 Sep matches; the 4 Sep record is extra; Mon 9 Sep and
        # Tue 10 Sep are missing.
        assert types == ["delete", "create", "create"]
        assert report.data["summary"]["created"] == 2
        assert report.data["summary"]["skipped"] == 1
        assert list((tmp_path / "out" / "reports").glob("sync_commands_*.csv"))

    def test_log_file_under_output_dir(self, inputs, monkeypatch):
        tmp_path, argv = inputs
        setup_logger = Mock(return_value=logging.getLogger("registry_sync.cli"))
        monkeypatch.setattr(run_sync, "setup_logger", setup_logger)

        assert run_sync.main(argv) == 0

        log_file = Path(setup_logger.call_args.kwargs["log_file"])
        assert log_file == tmp_path / "out" / "logs" / run_sync.LOG_FILENAME
        assert log_file.parent.is_dir()

    def test_window_and_delete_policy(self, inputs):
        tmp_path, argv = inputs

        exit_code = run_sync.main(argv + [
            "--start", "2024-09-01", "--end", "2024-09-08",
            "--extra-lessons", "delete",
        ])

        assert exit_code == 0
        report = load_report(tmp_path / "out" / "reports")
        assert [c["type"] for c in report.data["commands"]] == ["delete"]
        assert report.data["summary"]["deleted"] == 1
        assert report.data["extra_lesson_action"] == "delete"

    def test_invalid_lessons_file(self, inputs):
        tmp_path, argv = inputs
        (tmp_path / "lessons.json").write_text('{"lessons": [{"id": "x"}]}', encoding="utf-8")

        assert run_sync.main(argv) == 1

    def test_start_after_end(self, inputs):
        _, argv = inputs

        assert run_sync.main(argv + ["--start", "2024-09-10", "--end", "2024-09-01"]) == 1

    def test_bad_date_argument(self, inputs):
        _, argv = inputs

        with pytest.raises(SystemExit):
            run_sync.main(argv + ["--start", "10.09.2024"])
