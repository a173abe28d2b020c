"""
Shared pytest fixtures for forest inventory tests.

This module provides commonly used fixtures and builders for trees, plots
and inventories, reducing code duplication across test files.
"""
import matplotlib
matplotlib.use('Agg')

import pytest

from forest_inventory import ForestInventory, Plot, Species, Tree, TreeStatus


DOUGLAS_FIR = Species("Douglas Fir", "DF")
RED_CEDAR = Species("Western Red Cedar", "WRC")
HEMLOCK = Species("Western Hemlock", "WH")


def make_tree(plot_id=1, dbh=12.0, species=DOUGLAS_FIR, status=TreeStatus.LIVE,
              height=100.0, expansion_factor=5.0, tree_id=1, crown_ratio=None,
              age=None, defect=None):
    """Build a tree with sensible defaults for tests."""
    return Tree(
        tree_id=tree_id,
        plot_id=plot_id,
        species=species,
        dbh=dbh,
        height=height,
        crown_ratio=crown_ratio,
        status=status,
        expansion_factor=expansion_factor,
        age=age,
        defect=defect,
    )


def make_plot(plot_id, trees, plot_size_acres=0.2):
    """Build a plot holding the given trees."""
    return Plot(plot_id=plot_id, plot_size_acres=plot_size_acres, trees=list(trees))


def make_inventory(plots, name="Test"):
    """Build an inventory from plots."""
    return ForestInventory(name=name, plots=list(plots))


# =============================================================================
# Inventory Fixtures
# =============================================================================

@pytest.fixture
def empty_inventory():
    """An inventory with no plots."""
    return make_inventory([], name="Empty")


@pytest.fixture
def two_plot_inventory():
    """Two identical plots, each with a live 12" and 16" Douglas fir.

    - Expansion factor: 5.0
    - Height: 100 feet
    """
    plots = [
        make_plot(plot_id, [
            make_tree(plot_id, 12.0, tree_id=1),
            make_tree(plot_id, 16.0, tree_id=2),
        ])
        for plot_id in (1, 2)
    ]
    return make_inventory(plots, name="Two Plot")


@pytest.fixture
def mixed_inventory():
    """Two plots with mixed species and one dead tree.

    Plot 1: live DF 16", live WRC 12"
    Plot 2: live DF 18", dead DF 8"
    """
    return make_inventory([
        make_plot(1, [
            make_tree(1, 16.0, DOUGLAS_FIR, tree_id=1, height=80.0),
            make_tree(1, 12.0, RED_CEDAR, tree_id=2, height=80.0),
        ]),
        make_plot(2, [
            make_tree(2, 18.0, DOUGLAS_FIR, tree_id=1, height=80.0),
            make_tree(2, 8.0, DOUGLAS_FIR, TreeStatus.DEAD, tree_id=2, height=80.0),
        ]),
    ], name="Mixed")


@pytest.fixture
def varied_inventory():
    """Five plots with varying density and three species."""
    plots = []
    for plot_id in range(1, 6):
        trees = [
            make_tree(plot_id, 10.0 + plot_id, DOUGLAS_FIR, tree_id=1,
                      height=70.0 + 5 * plot_id, expansion_factor=5.0),
            make_tree(plot_id, 6.0 + plot_id * 0.5, RED_CEDAR, tree_id=2,
                      height=50.0, expansion_factor=5.0 + plot_id),
            make_tree(plot_id, 20.0, HEMLOCK, tree_id=3, height=110.0,
                      expansion_factor=2.0),
        ]
        if plot_id % 2 == 0:
            trees.append(make_tree(plot_id, 4.5, HEMLOCK, tree_id=4, height=None,
                                   expansion_factor=10.0))
        plots.append(make_plot(plot_id, trees))
    return make_inventory(plots, name="Varied")


@pytest.fixture
def dead_only_inventory():
    """Plots whose trees are all dead, cut or missing."""
    return make_inventory([
        make_plot(1, [
            make_tree(1, 12.0, DOUGLAS_FIR, TreeStatus.DEAD, tree_id=1),
            make_tree(1, 14.0, RED_CEDAR, TreeStatus.CUT, tree_id=2),
        ]),
        make_plot(2, [
            make_tree(2, 10.0, HEMLOCK, TreeStatus.MISSING, tree_id=1),
        ]),
    ], name="Dead Only")
