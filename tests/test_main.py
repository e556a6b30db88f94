import logging
import sys
import os

import pytest

sys.path.insert(0, os.path.join(os.path.dirname(__file__), "..", "src"))

from main import build_arg_parser, main


class TestMain:
    def setup_method(self):
        self._level = logging.getLogger().level

    def teardown_method(self):
        # drop the stderr handler main() installed; its stream was the capture buffer
        root = logging.getLogger()
        for handler in root.handlers[:]:
            if type(handler) is logging.StreamHandler:
                root.removeHandler(handler)
        root.setLevel(self._level)

    def test_end_to_end(self, tmp_path, capsys):
        csv_file = tmp_path / "transactions.csv"
        csv_file.write_text('\n'.join([
            "type, client, tx, amount",
            "deposit, 2, 2, 2.0",
            "deposit, 1, 1, 1.0",
            "deposit, 1, 3, 2.0",
            "withdrawal, 1, 4, 1.5",
            "withdrawal, 2, 5, 3.0",
            "deposit, 3, 6, 10",
            "dispute, 3, 6,",
        ]))

        assert main([str(csv_file)]) == 0

        captured = capsys.readouterr()
        assert captured.out == (
            "client,available,held,total,locked\n"
            "1,1.5,0,1.5,false\n"
            "2,2,0,2,false\n"
            "3,0,10,10,false\n"
        )
        assert "Line 6" in captured.err

    def test_chargeback_locks(self, tmp_path, capsys):
        csv_file = tmp_path / "transactions.csv"
        csv_file.write_text('\n'.join([
            "type, client, tx, amount",
            "deposit, 1, 1, 10.0",
            "dispute, 1, 1,",
            "chargeback, 1, 1,",
            "deposit, 1, 3, 5.0",
        ]))

        assert main([str(csv_file)]) == 0

        captured = capsys.readouterr()
        assert captured.out.splitlines()[1] == "1,0,0,0,true"
        assert "account is locked" in captured.err

    def test_missing_input_file(self, tmp_path, capsys):
        assert main([str(tmp_path / "nope.csv")]) == 1

        captured = capsys.readouterr()
        assert captured.out == ""
        assert "ERROR: Cannot read" in captured.err

    def test_undecodable_input_file(self, tmp_path, capsys):
        csv_file = tmp_path / "transactions.csv"
        csv_file.write_bytes(b"type, client, tx, amount\ndeposit, 1, 1, 1.0\n\xff\n")

        assert main([str(csv_file)]) == 1

        captured = capsys.readouterr()
        assert captured.out == ""
        assert "ERROR: Cannot read" in captured.err

    def test_usage_error(self, capsys):
        with pytest.raises(SystemExit) as exc_info:
            main([])
        assert exc_info.value.code == 2

    def test_policy_flags(self):
        args = build_arg_parser().parse_args([
            "in.csv",
            "--allow-disputes-on-locked-accounts",
            "--allow-redispute-after-chargeback",
            "--log-level",
            "debug",
        ])

        assert args.allow_disputes_on_locked_accounts is True
        assert args.allow_redispute_after_chargeback is True
        assert args.log_level == "DEBUG"

    def test_flags_default_off(self):
        args = build_arg_parser().parse_args(["in.csv"])

        assert args.allow_disputes_on_locked_accounts is False
        assert args.allow_redispute_after_chargeback is False
        assert args.log_level == "WARNING"
