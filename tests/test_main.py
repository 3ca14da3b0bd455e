import sys
import os
from pathlib import Path

import pytest

sys.path.insert(0, os.path.join(os.path.dirname(__file__), "..", "src"))

import main

FILES_DIR = Path(__file__).parent / "files"
CASES = sorted(path.name for path in FILES_DIR.iterdir() if path.is_dir())


def read_rows(text: str):
    lines = [line.strip() for line in text.strip().splitlines()]
    return lines[0], sorted(lines[1:])


class TestMain:
    @pytest.mark.parametrize("case", CASES)
    def test_fixture_cases(self, case, capsys):
        case_dir = FILES_DIR / case

        exit_code = main.main([str(case_dir / "input.csv")])

        captured = capsys.readouterr()
        assert exit_code == 0
        assert read_rows(captured.out) == read_rows((case_dir / "output.csv").read_text())
        assert captured.err.strip().splitlines()[-1].startswith("Processed: ")

    def test_usage_without_arguments(self, capsys):
        exit_code = main.main([])

        assert exit_code == 1
        assert "Usage" in capsys.readouterr().err

    def test_missing_file(self, tmp_path, capsys):
        exit_code = main.main([str(tmp_path / "missing.csv")])

        captured = capsys.readouterr()
        assert exit_code == 1
        assert "Unable to read" in captured.err
        assert captured.out == ""

    def test_stats_line(self, tmp_path, capsys):
        csv_file = tmp_path / "test.csv"
        csv_file.write_text('\n'.join([
            "type, client, tx, amount",
            "deposit, 1, 1, 10",
            "withdrawal, 1, 2, 20",
            "bogus, 1, 3, 1",
        ]))

        main.main([str(csv_file)])

        assert "Processed: 1, Failed: 1, Skipped: 1" in capsys.readouterr().err

    def test_bad_rows_do_not_stop_the_run(self, tmp_path, capsys):
        csv_file = tmp_path / "test.csv"
        csv_file.write_bytes(
            b"type,client,tx,amount\n"
            b"deposit,1,1,5\n"
            b"deposit,1,2,\xff\xfe\n"
            b"deposit,1,3," + b"7" * 200_000 + b"\n"
            b"deposit,1,4,1\n"
        )

        exit_code = main.main([str(csv_file)])

        captured = capsys.readouterr()
        assert exit_code == 0
        assert captured.out.splitlines() == [
            "client,available,held,total,locked",
            "1,6.0000,0.0000,6.0000,false",
        ]
        assert "Processed: 2, Failed: 1, Skipped: 1" in captured.err
