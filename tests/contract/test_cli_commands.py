"""CLI contract tests.

Covers argument parsing of every command and the exit codes of the
dispatcher and console script entry points.
"""

import csv
import json

import pytest
import yaml

from xtab.cli import main as cli_main
from xtab.cli.argument_parser import create_parser, parse_args
from xtab.exceptions import CrosstabError


def run_main(argv):
    """Run xtab main() and return its exit code."""
    with pytest.raises(SystemExit) as exc_info:
        cli_main.main(argv)
    return exc_info.value.code


class TestCLIArgumentParsing:
    """Argument parsing for each command."""

    def test_crosstab_long_flags(self):
        args = parse_args([
            "xt_crosstab", "-i", "infile.csv", "-o", "outfile.csv",
            "--row", "1,2,3", "--col", "1,2,3", "--value", "1,2,3", "--format", "1",
        ])
        assert args.subcommand == "xt_crosstab"
        assert args.infile == "infile.csv"
        assert args.outfile == "outfile.csv"
        assert args.row == ["1,2,3"]
        assert args.col == ["1,2,3"]
        assert args.value == ["1,2,3"]
        assert args.format == 1

    def test_crosstab_short_and_repeated_flags(self):
        args = parse_args([
            "xt_crosstab", "-i", "in.csv", "-o", "out.csv",
            "-r", "region", "-c", "year", "-c", "quarter", "-v", "sales,units", "-f", "4",
        ])
        assert args.col == ["year", "quarter"]
        assert args.format == 4
        assert args.delimiter == ","
        assert args.quiet is False

    def test_crosstab_required_arguments(self):
        with pytest.raises(SystemExit):
            parse_args(["xt_crosstab", "-i", "in.csv", "-o", "out.csv", "-r", "a", "-c", "b"])

    @pytest.mark.parametrize("header_format", ["0", "5", "two"])
    def test_crosstab_format_range(self, header_format):
        with pytest.raises(SystemExit):
            parse_args(["xt_crosstab", "-i", "in.csv", "-o", "out.csv",
                        "-r", "a", "-c", "b", "-v", "c", "-f", header_format])

    def test_crosstab_outfile_must_be_csv(self, capsys):
        with pytest.raises(SystemExit) as exc_info:
            parse_args(["xt_crosstab", "-i", "in.csv", "-o", "out.txt", "-r", "a", "-c", "b", "-v", "c"])
        assert exc_info.value.code == 2
        assert "must be a .csv file" in capsys.readouterr().err

    def test_validatehooks_defaults(self):
        args = parse_args(["xt_validatehooks"])
        assert args.config is None
        assert args.format == "table"
        assert args.strict is False

    def test_output_format_choices(self):
        assert parse_args(["xt_listhooks", "--format", "yaml"]).format == "yaml"
        with pytest.raises(SystemExit):
            parse_args(["xt_listhooks", "--format", "xml"])

    def test_planhooks_filenames_and_hooks(self, tmp_path):
        args = parse_args(["xt_planhooks", "--root", str(tmp_path), "--hook", "check-yaml", "a.yaml", "b.md"])
        assert args.filenames == ["a.yaml", "b.md"]
        assert args.hooks == ["check-yaml"]

    def test_root_must_exist(self, tmp_path):
        with pytest.raises(SystemExit):
            parse_args(["xt_checkhooks", "--root", str(tmp_path / "missing")])

    def test_parser_lists_every_command(self):
        help_text = create_parser().format_help()
        for command in cli_main.COMMAND_REGISTRY:
            assert command in help_text


class TestCommandEntryPoints:
    """Console script functions exist for every registered command."""

    def test_command_functions(self):
        for command_name, (_, _, description) in cli_main.COMMAND_REGISTRY.items():
            func = getattr(cli_main, command_name)
            assert callable(func)
            assert func.__doc__ == description

    def test_direct_entry_point(self, sales_csv, tmp_path):
        out = tmp_path / "wide.csv"
        with pytest.raises(SystemExit) as exc_info:
            cli_main.xt_crosstab(["-i", str(sales_csv), "-o", str(out), "-r", "region",
                                  "-c", "year", "-v", "sales", "-q"])
        assert exc_info.value.code == 0
        assert out.exists()


class TestMainDispatcher:

    def test_help(self, capsys):
        assert run_main([]) == 0
        assert "Usage: xtab <command>" in capsys.readouterr().out

    def test_version(self, capsys):
        assert run_main(["--version"]) == 0
        assert capsys.readouterr().out.startswith("xtab ")

    def test_unknown_command_suggests(self, capsys):
        assert run_main(["crosstb"]) == 1
        err = capsys.readouterr().err
        assert "unknown command 'crosstb'" in err
        assert "xtab crosstab" in err


class TestCrosstabCommand:

    def test_writes_output(self, sales_csv, tmp_path, capsys):
        out = tmp_path / "wide.csv"
        code = run_main(["crosstab", "-i", str(sales_csv), "-o", str(out),
                         "-r", "region", "-c", "year", "-v", "sales,units", "-f", "2"])
        assert code == 0
        with open(out, newline="", encoding="utf-8") as f:
            rows = list(csv.reader(f))
        assert rows[0] == ["", "2023", "2023", "2024", "2024"]
        assert rows[1] == ["region", "sales", "units", "sales", "units"]
        assert "Wrote 2 rows x 5 columns" in capsys.readouterr().out

    def test_missing_input_exits_2(self, tmp_path, capsys):
        code = run_main(["crosstab", "-i", str(tmp_path / "missing.csv"), "-o", str(tmp_path / "out.csv"),
                         "-r", "a", "-c", "b", "-v", "c"])
        assert code == 2
        assert capsys.readouterr().err.count("The input file does not exist") == 1

    def test_missing_column_exits_2(self, sales_csv, tmp_path, capsys):
        code = run_main(["crosstab", "-i", str(sales_csv), "-o", str(tmp_path / "out.csv"),
                         "-r", "region", "-c", "quarter", "-v", "sales"])
        assert code == 2
        assert "quarter" in capsys.readouterr().err


class TestValidateHooksCommand:

    def test_valid_config_exits_0(self, config_file, capsys):
        assert run_main(["validatehooks", "--config", str(config_file)]) == 0
        assert "✓ Valid" in capsys.readouterr().out

    def test_warnings_exit_1(self, write_config, sample_config_data):
        sample_config_data["repos"][1]["rev"] = "main"
        path = write_config(sample_config_data)
        assert run_main(["validatehooks", "--config", str(path)]) == 1

    def test_strict_turns_warnings_into_errors(self, write_config, sample_config_data):
        sample_config_data["repos"][1]["rev"] = "main"
        path = write_config(sample_config_data)
        assert run_main(["validatehooks", "--config", str(path), "--strict"]) == 2

    def test_errors_exit_2_with_json_report(self, write_config, sample_config_data, capsys):
        del sample_config_data["repos"][1]["rev"]
        path = write_config(sample_config_data)
        assert run_main(["validatehooks", "--config", str(path), "--format", "json"]) == 2
        report = json.loads(capsys.readouterr().out)
        assert report["success"] is False
        assert report["data"]["errors"][0]["field_name"] == "repos[1].rev"
        assert report["data"]["total_hooks"] == 5

    def test_yaml_syntax_error(self, write_config, capsys):
        path = write_config("repos: [\n  - repo: meta\n")
        assert run_main(["validatehooks", "--config", str(path)]) == 2
        assert "Invalid YAML" in capsys.readouterr().out

    def test_missing_config(self, tmp_path):
        assert run_main(["validatehooks", "--config", str(tmp_path / "none.yaml")]) == 2


class TestListHooksCommand:

    def test_json_listing(self, config_file, capsys):
        assert run_main(["listhooks", "--config", str(config_file), "--format", "json"]) == 0
        output = json.loads(capsys.readouterr().out)
        assert output["data"]["total_count"] == 5
        assert [hook["id"] for hook in output["data"]["hooks"]][:2] == ["identity", "check-hooks-apply"]

    def test_repo_filter(self, config_file, capsys):
        assert run_main(["listhooks", "--config", str(config_file), "--format", "yaml",
                         "--repo", "markdownlint"]) == 0
        output = yaml.safe_load(capsys.readouterr().out)
        assert [hook["id"] for hook in output["data"]["hooks"]] == ["markdownlint"]
        assert output["data"]["hooks"][0]["rev"] == "v0.39.0"

    def test_quiet_prints_count(self, config_file, capsys):
        assert run_main(["listhooks", "--config", str(config_file), "--format", "quiet"]) == 0
        assert capsys.readouterr().out.strip() == "5"

    def test_invalid_config_exits_2(self, write_config, capsys):
        path = write_config({"repos": [{"repo": "meta", "rev": "v1", "hooks": [{"id": "identity"}]}]})
        assert run_main(["listhooks", "--config", str(path)]) == 2
        assert "does not accept a rev" in capsys.readouterr().err


class TestPlanAndCheckHooksCommands:

    def test_plan_explicit_files(self, sample_repo, sample_config_data, write_config, capsys):
        path = write_config(sample_config_data)
        code = run_main(["planhooks", "--config", str(path), "--root", str(sample_repo),
                         "--format", "json", "README.md", "src/app.py"])
        assert code == 0
        plan = {entry["hook_id"]: entry for entry in json.loads(capsys.readouterr().out)["data"]["hooks"]}
        assert plan["markdownlint"]["files"] == ["README.md"]
        assert plan["check-yaml"]["file_count"] == 2

    def test_check_hooks_failure_exits_1(self, sample_repo, sample_config_data, write_config, capsys):
        sample_config_data["repos"][2]["hooks"][0]["files"] = r"\.rst$"
        path = write_config(sample_config_data)
        assert run_main(["checkhooks", "--config", str(path), "--root", str(sample_repo)]) == 1
        assert "markdownlint does not apply to this repository" in capsys.readouterr().out

    def test_check_hooks_pass(self, sample_repo, sample_config_data, write_config):
        path = write_config(sample_config_data)
        assert run_main(["checkhooks", "--config", str(path), "--root", str(sample_repo),
                         "--format", "quiet"]) == 0

    def test_no_meta_hooks(self, sample_repo, sample_config_data, write_config, capsys):
        del sample_config_data["repos"][0]
        path = write_config(sample_config_data)
        assert run_main(["checkhooks", "--config", str(path), "--root", str(sample_repo)]) == 0
        assert "No meta hooks configured" in capsys.readouterr().out


class TestErrorHandling:
    """Exception to exit code mapping of _execute_command_safely."""

    @staticmethod
    def _raising(error):
        def command(args):
            raise error
        return command

    def test_unexpected_error_exits_4(self, capsys):
        code = cli_main._execute_command_safely("xt_crosstab", self._raising(RuntimeError("boom")), None)
        assert code == 4
        assert "Internal error" in capsys.readouterr().err

    def test_permission_error_exits_3(self, capsys):
        code = cli_main._execute_command_safely("xt_crosstab", self._raising(PermissionError("out.csv")), None)
        assert code == 3
        assert "Permission denied" in capsys.readouterr().err

    def test_xtab_error_gets_command_context(self, capsys):
        error = CrosstabError("Columns not found in the input file: year")
        code = cli_main._execute_command_safely("xt_crosstab", self._raising(error), None)
        assert code == 2
        assert error.context["command"] == "xt_crosstab"
        assert capsys.readouterr().err.count("Columns not found") == 1
