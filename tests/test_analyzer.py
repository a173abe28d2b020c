"""
Tests for the Analyzer facade.
"""
import pytest

from forest_inventory import (
    Analyzer,
    DiameterDistribution,
    LogisticGrowth,
    SamplingStatistics,
    VolumeEquation,
    compute_stand_metrics,
    project_growth,
)


class TestAnalyzer:
    """Analyzer delegates to the analysis functions without changing the inventory."""

    def test_stand_metrics(self, mixed_inventory):
        analyzer = Analyzer(mixed_inventory)
        assert analyzer.stand_metrics() == compute_stand_metrics(mixed_inventory)

    def test_sampling_statistics(self, varied_inventory):
        analyzer = Analyzer(varied_inventory)
        assert analyzer.sampling_statistics(0.90) == SamplingStatistics.compute(varied_inventory, 0.90)

    def test_diameter_distribution(self, varied_inventory):
        analyzer = Analyzer(varied_inventory)
        assert analyzer.diameter_distribution(4.0) == DiameterDistribution.from_inventory(
            varied_inventory, 4.0)

    def test_project_growth(self, two_plot_inventory):
        model = LogisticGrowth(0.03, 300.0, 0.005)
        analyzer = Analyzer(two_plot_inventory)
        assert analyzer.project_growth(model, 10) == project_growth(two_plot_inventory, model, 10)

    def test_volume_equation_applies_to_all_operations(self, two_plot_inventory):
        equation = VolumeEquation(cuft_b1=0.005)
        default = Analyzer(two_plot_inventory)
        custom = Analyzer(two_plot_inventory, equation)

        assert custom.volume_equation is equation
        ratio = 0.005 / 0.002454
        assert custom.stand_metrics().total_volume_cuft == pytest.approx(
            default.stand_metrics().total_volume_cuft * ratio)
        assert custom.sampling_statistics().volume_cuft.mean == pytest.approx(
            default.sampling_statistics().volume_cuft.mean * ratio)
        model = LogisticGrowth(0.03, 300.0, 0.005)
        assert custom.project_growth(model, 0)[0].volume_cuft == pytest.approx(
            default.project_growth(model, 0)[0].volume_cuft * ratio)

    def test_inventory_unchanged(self, mixed_inventory):
        before = mixed_inventory.to_dict()
        analyzer = Analyzer(mixed_inventory)
        analyzer.stand_metrics()
        analyzer.sampling_statistics()
        analyzer.diameter_distribution()
        analyzer.project_growth(LogisticGrowth(0.03, 300.0, 0.005), 30)
        assert mixed_inventory.to_dict() == before
        assert analyzer.inventory is mixed_inventory

    def test_repeated_calls_are_identical(self, varied_inventory):
        analyzer = Analyzer(varied_inventory)
        assert analyzer.stand_metrics() == analyzer.stand_metrics()

    def test_no_new_attributes(self, mixed_inventory):
        analyzer = Analyzer(mixed_inventory)
        with pytest.raises(AttributeError):
            analyzer.cache = {}

    def test_repr(self, two_plot_inventory):
        assert repr(Analyzer(two_plot_inventory)) == "Analyzer(inventory='Two Plot')"
