"""
Tests for the forest-inventory command-line interface.
"""
import pytest

from forest_inventory import LinearGrowth, LogisticGrowth, read_json, write_csv
from forest_inventory.main import build_parser, growth_model_from_options, main
from tests.conftest import make_inventory, make_plot, make_tree


@pytest.fixture(autouse=True)
def wide_console(monkeypatch):
    """Keep rich from wrapping table rows."""
    monkeypatch.setenv("COLUMNS", "200")


@pytest.fixture
def mixed_csv(mixed_inventory, tmp_path):
    path = tmp_path / 'mixed.csv'
    write_csv(mixed_inventory, path)
    return path


class TestParser:
    def test_command_required(self):
        with pytest.raises(SystemExit):
            build_parser().parse_args([])

    def test_growth_defaults(self):
        args = build_parser().parse_args(["growth", "-i", "plots.csv"])
        assert args.years == 20
        assert args.model == "logistic"
        assert args.rate is None

    def test_analyze_toggles(self):
        args = build_parser().parse_args(["analyze", "-i", "plots.csv", "--no-species"])
        assert args.species is False
        assert args.distribution is True
        assert args.confidence == pytest.approx(0.95)


class TestGrowthModelFromOptions:
    def test_defaults(self):
        assert growth_model_from_options('logistic') == LogisticGrowth(0.03, 300.0, 0.005)

    def test_rate_is_increment_for_linear(self):
        assert growth_model_from_options('linear', rate=2.0) == LinearGrowth(2.0, 0.5)

    def test_overrides(self):
        model = growth_model_from_options('log', rate=0.05, capacity=250.0, mortality=0.01)
        assert model == LogisticGrowth(0.05, 250.0, 0.01)

    def test_capacity_ignored_without_logistic(self):
        model = growth_model_from_options('exponential', capacity=250.0)
        assert model.annual_rate == pytest.approx(0.03)
        assert not hasattr(model, 'carrying_capacity')


class TestCommands:
    def test_summary(self, mixed_csv, capsys):
        assert main(["summary", "-i", str(mixed_csv)]) == 0
        out = capsys.readouterr().out
        assert "Quick Summary" in out
        assert "Plots:          2" in out
        assert "Total Trees:    4" in out

    def test_analyze(self, mixed_csv, capsys):
        assert main(["analyze", "-i", str(mixed_csv)]) == 0
        out = capsys.readouterr().out
        assert "Trees per Acre" in out
        assert "Species Composition" in out
        assert "Diameter Distribution" in out
        assert "Sampling Statistics (95% confidence, 2 plots)" in out

    def test_analyze_without_optional_sections(self, mixed_csv, capsys):
        assert main(["analyze", "-i", str(mixed_csv), "--no-species", "--no-distribution"]) == 0
        out = capsys.readouterr().out
        assert "Species Composition" not in out
        assert "Diameter Distribution" not in out

    def test_analyze_single_plot_warns(self, tmp_path, capsys):
        path = tmp_path / 'single.csv'
        write_csv(make_inventory([make_plot(1, [make_tree(1, 14.0)])]), path)
        assert main(["analyze", "-i", str(path)]) == 0
        out = capsys.readouterr().out
        assert "Warning:" in out
        assert "Sampling Statistics" not in out

    def test_growth(self, mixed_csv, capsys):
        assert main(["growth", "-i", str(mixed_csv), "-y", "5", "-m", "linear"]) == 0
        out = capsys.readouterr().out
        assert "Growth Projection: 5 years (linear)" in out
        assert "Growth Projections" in out

    def test_unknown_growth_model(self, mixed_csv, capsys):
        assert main(["growth", "-i", str(mixed_csv), "-m", "gompertz"]) == 1
        assert "Unknown growth model" in capsys.readouterr().err

    def test_convert_csv_to_json(self, mixed_csv, mixed_inventory, tmp_path, capsys):
        output = tmp_path / 'mixed.json'
        assert main(["convert", "-i", str(mixed_csv), "-o", str(output), "--pretty"]) == 0
        assert "Success:" in capsys.readouterr().out
        restored = read_json(output)
        assert restored.num_trees() == mixed_inventory.num_trees()
        assert restored.plots[0].trees == mixed_inventory.plots[0].trees

    def test_convert_unsupported_output(self, mixed_csv, tmp_path, capsys):
        assert main(["convert", "-i", str(mixed_csv), "-o", str(tmp_path / 'out.txt')]) == 1
        assert "Unsupported output format" in capsys.readouterr().err

    def test_missing_input_file(self, tmp_path, capsys):
        assert main(["summary", "-i", str(tmp_path / 'absent.csv')]) == 1
        assert "Error:" in capsys.readouterr().err
