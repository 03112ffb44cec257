"""
Unit tests for CLI commands.
"""

import json

from ratetest.cli.main import app


class TestCLIHelp:
    """Test help messages and basic CLI functionality."""

    def test_main_help(self, cli_runner):
        result = cli_runner.invoke(app, ["--help"])
        assert result.exit_code == 0
        assert "pvals" in result.stdout
        assert "classify" in result.stdout

    def test_pvals_help(self, cli_runner):
        result = cli_runner.invoke(app, ["pvals", "--help"])
        assert result.exit_code == 0
        assert "--fits" in result.stdout or "-f" in result.stdout
        assert "--mode" in result.stdout


class TestCLIPvals:
    """Test 'pvals' command functionality."""

    def test_text_output(self, cli_runner, fit_table_file):
        result = cli_runner.invoke(app, ["pvals", "-f", str(fit_table_file)])

        assert result.exit_code == 0
        assert "Rate variability p-values" in result.stdout
        assert "geneB" in result.stdout
        assert "synthesis" in result.stdout

    def test_tsv_output(self, cli_runner, fit_table_file):
        result = cli_runner.invoke(app, [
            "pvals", "-f", str(fit_table_file), "--format", "tsv", "--cTsh", "0.05",
        ])

        assert result.exit_code == 0
        lines = result.stdout.strip().split("\n")
        assert lines[0] == "gene\tsynthesis\tdegradation\tprocessing"
        assert lines[1].startswith("geneB\t")
        assert lines[2].startswith("geneA\t")
        # geneA fits well everywhere: nothing is tested
        assert lines[2] == "geneA\t1.0\t1.0\t1.0"

    def test_json_output(self, cli_runner, fit_table_file):
        result = cli_runner.invoke(app, [
            "pvals", "-f", str(fit_table_file), "--format", "json",
        ])

        assert result.exit_code == 0
        data = json.loads(result.stdout)
        assert data["model_selection"] == "llr"
        assert set(data["pvals"]) == {"geneA", "geneB"}
        assert data["pvals"]["geneB"]["synthesis"] < 0.001

    def test_aic_mode(self, cli_runner, fit_table_file):
        result = cli_runner.invoke(app, [
            "pvals", "-f", str(fit_table_file), "--mode", "aic", "--format", "json",
        ])

        assert result.exit_code == 0
        data = json.loads(result.stdout)
        assert data["model_selection"] == "aic"
        assert data["chisquare"] is None
        # model "a" has the lowest AIC for geneB
        assert data["pvals"]["geneB"] == {
            "synthesis": 0.3, "degradation": 1.0, "processing": 1.0,
        }

    def test_config_file(self, cli_runner, fit_table_file, tmp_path):
        config = tmp_path / "config.json"
        config.write_text(json.dumps({"modelSelection": "aic"}))

        result = cli_runner.invoke(app, [
            "pvals", "-f", str(fit_table_file), "-c", str(config), "--format", "json",
        ])

        assert result.exit_code == 0
        assert json.loads(result.stdout)["model_selection"] == "aic"

    def test_invalid_config_exits(self, cli_runner, fit_table_file, tmp_path):
        config = tmp_path / "config.json"
        config.write_text(json.dumps({"modelSelection": "bic"}))

        result = cli_runner.invoke(app, ["pvals", "-f", str(fit_table_file), "-c", str(config)])

        assert result.exit_code == 1

    def test_bad_fit_table_exits(self, cli_runner, tmp_path):
        path = tmp_path / "fits.tsv"
        path.write_text("gene\tmodel\ng1\t0\n")

        result = cli_runner.invoke(app, ["pvals", "-f", str(path)])

        assert result.exit_code == 1

    def test_threshold_above_one(self, cli_runner, fit_table_file):
        result = cli_runner.invoke(app, [
            "pvals", "-f", str(fit_table_file), "--format", "tsv", "--cTsh", "1.5",
        ])

        assert result.exit_code == 0
        assert result.stdout.strip().split("\n")[0].startswith("gene\tsynthesis")

    def test_unknown_mode_rejected(self, cli_runner, fit_table_file):
        result = cli_runner.invoke(app, ["pvals", "-f", str(fit_table_file), "--mode", "bic"])

        assert result.exit_code != 0


class TestCLIClassify:
    """Test 'classify' command functionality."""

    def test_classify_tsv(self, cli_runner, fit_table_file):
        result = cli_runner.invoke(app, ["classify", "-f", str(fit_table_file)])

        assert result.exit_code == 0
        lines = result.stdout.strip().split("\n")
        assert lines[0] == "gene\tclass"
        assert lines[1].startswith("geneB\t")
        assert lines[2] == "geneA\t0"

    def test_classify_json(self, cli_runner, fit_table_file):
        result = cli_runner.invoke(app, [
            "classify", "-f", str(fit_table_file), "--format", "json",
        ])

        assert result.exit_code == 0
        classes = json.loads(result.stdout)
        assert classes["geneA"] == "0"
        assert "a" in classes["geneB"]
