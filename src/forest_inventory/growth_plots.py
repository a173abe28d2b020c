"""
Visualization functions for growth projections and diameter distributions.
"""
import matplotlib.pyplot as plt
import seaborn as sns

from .growth import projections_to_dataframe

# Set default style
try:
    plt.style.use('seaborn-v0_8')
except OSError:
    plt.style.use('default')

sns.set_palette("husl")


def plot_growth_projection(projections, save_path=None, title='Stand Growth Projection'):
    """Plot projected stand metrics over time.

    Args:
        projections: List of GrowthProjection objects
        save_path: Optional path to save the plot
        title: Figure title

    Returns:
        The matplotlib Figure (already closed)
    """
    frame = projections_to_dataframe(projections)

    fig, ((ax1, ax2), (ax3, ax4)) = plt.subplots(2, 2, figsize=(12, 10))
    fig.suptitle(title, fontsize=14)

    # Trees per acre
    ax1.plot(frame['year'], frame['tpa'], 'b-', label='Trees per Acre')
    ax1.set_xlabel('Year')
    ax1.set_ylabel('Trees per Acre')
    ax1.grid(True)

    # Basal area
    ax2.plot(frame['year'], frame['basal_area'], 'k-', label='Basal Area')
    ax2.set_xlabel('Year')
    ax2.set_ylabel('Basal Area (sq ft/acre)')
    ax2.grid(True)

    # Cubic volume
    ax3.plot(frame['year'], frame['volume_cuft'], 'g-', label='Cubic Volume')
    ax3.set_xlabel('Year')
    ax3.set_ylabel('Volume (cubic feet/acre)')
    ax3.grid(True)

    # Board foot volume
    ax4.plot(frame['year'], frame['volume_bdft'], 'r-', label='Board Foot Volume')
    ax4.set_xlabel('Year')
    ax4.set_ylabel('Volume (board feet/acre)')
    ax4.grid(True)

    plt.tight_layout()

    if save_path:
        plt.savefig(save_path, dpi=300, bbox_inches='tight')

    plt.close(fig)
    return fig


def plot_diameter_distribution(distribution, save_path=None, title='Diameter Distribution'):
    """Plot trees per acre by diameter class as a bar chart.

    Args:
        distribution: DiameterDistribution to plot
        save_path: Optional path to save the plot
        title: Figure title

    Returns:
        The matplotlib Figure (already closed)
    """
    frame = distribution.to_dataframe()

    fig, ax = plt.subplots(figsize=(10, 6))
    if frame.empty:
        ax.text(0.5, 0.5, 'No data available', ha='center', va='center',
                transform=ax.transAxes)
    else:
        ax.bar(frame['midpoint'], frame['tpa'], width=distribution.class_width * 0.9,
               edgecolor='black')
    ax.set_xlabel('DBH Class Midpoint (inches)')
    ax.set_ylabel('Trees per Acre')
    ax.set_title(title)
    ax.grid(True, axis='y')

    if save_path:
        plt.savefig(save_path)

    plt.close(fig)
    return fig
