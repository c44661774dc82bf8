"""
TSP Solver - Visualization Module
Plot open-path tours and solver convergence.
"""

import matplotlib.pyplot as plt
from typing import List

from tsp_core import Tour


class TSPVisualizer:
    """Visualize TSP tours and optimization progress."""

    def __init__(self, figsize=(12, 8)):
        self.figsize = figsize

    def _finish(self, fig, save_path, show, label):
        plt.tight_layout()

        if save_path:
            fig.savefig(save_path, dpi=300, bbox_inches='tight')
            print(f"{label} saved to {save_path}")

        if show:
            plt.show()
        else:
            plt.close(fig)

    def plot_tour(
        self,
        tour: Tour,
        title: str = "TSP Tour",
        show_arrows: bool = True,
        save_path: str = None,
        show: bool = True
    ):
        """
        Plot a single tour as an open path.

        Args:
            tour: The tour to visualize
            title: Plot title
            show_arrows: Show direction arrows on edges
            save_path: Optional path to save the figure
            show: Open a window; the figure is closed instead when False
        """
        fig, ax = plt.subplots(figsize=self.figsize)

        if len(tour.cities) == 0:
            ax.text(0.5, 0.5, 'No cities in tour',
                    ha='center', va='center', fontsize=16)
            self._finish(fig, save_path, show, "Tour")
            return fig

        x_coords = [city.x for city in tour.cities]
        y_coords = [city.y for city in tour.cities]

        ax.scatter(x_coords, y_coords,
                   c='red', s=200, zorder=3, edgecolors='darkred', linewidth=2)

        ax.plot(x_coords, y_coords,
                'b-', linewidth=2, alpha=0.6, zorder=1)

        for i, city in enumerate(tour.cities):
            ax.annotate(city.name or str(i),
                        (city.x, city.y),
                        textcoords='offset points',
                        xytext=(0, 12),
                        fontsize=9,
                        ha='center')

        if show_arrows:
            for start, end in zip(tour.cities, tour.cities[1:]):
                mid_x = (start.x + end.x) / 2
                mid_y = (start.y + end.y) / 2
                dx = end.x - start.x
                dy = end.y - start.y

                ax.annotate('',
                            xy=(mid_x + dx*0.1, mid_y + dy*0.1),
                            xytext=(mid_x - dx*0.1, mid_y - dy*0.1),
                            arrowprops=dict(arrowstyle='->',
                                            color='blue',
                                            lw=2,
                                            alpha=0.7))

        # Start and end of the path
        start_city = tour.cities[0]
        end_city = tour.cities[-1]
        ax.scatter([start_city.x], [start_city.y],
                   c='green', s=300, zorder=4,
                   marker='*', edgecolors='darkgreen', linewidth=2, label='Start')
        ax.scatter([end_city.x], [end_city.y],
                   c='orange', s=300, zorder=4,
                   marker='s', edgecolors='darkorange', linewidth=2, label='End')

        distance = tour.get_total_distance()
        ax.set_title(f"{title}\nPath Length: {distance:.2f}",
                     fontsize=14, weight='bold')
        ax.set_xlabel('X Coordinate', fontsize=12)
        ax.set_ylabel('Y Coordinate', fontsize=12)
        ax.grid(True, alpha=0.3)
        ax.set_aspect('equal')
        ax.legend(loc='best', fontsize=10)

        self._finish(fig, save_path, show, "Tour")
        return fig

    def plot_convergence(
        self,
        history: List[float],
        title: str = "Convergence History",
        xlabel: str = "Generation",
        ylabel: str = "Best Path Length",
        save_path: str = None,
        show: bool = True
    ):
        """
        Plot the best-so-far path length per generation.

        Args:
            history: Best path length after each generation
            title: Plot title
            xlabel: X-axis label
            ylabel: Y-axis label
            save_path: Optional path to save the figure
            show: Open a window; the figure is closed instead when False
        """
        if len(history) == 0:
            raise ValueError("No convergence history to plot")

        fig, ax = plt.subplots(figsize=(10, 6))

        generations = range(1, len(history) + 1)

        ax.plot(generations, history, 'b-', linewidth=2, label='Best Path Length')
        ax.fill_between(generations, history, alpha=0.3)

        initial = history[0]
        final = history[-1]
        improvement = ((initial - final) / initial) * 100 if initial else 0.0

        ax.axhline(y=final, color='g', linestyle='--',
                   linewidth=1.5, label=f'Final: {final:.2f}')
        ax.axhline(y=initial, color='r', linestyle='--',
                   linewidth=1.5, label=f'Initial: {initial:.2f}')

        ax.set_xlabel(xlabel, fontsize=12)
        ax.set_ylabel(ylabel, fontsize=12)
        ax.set_title(f"{title}\nImprovement: {improvement:.2f}%",
                     fontsize=14, weight='bold')
        ax.grid(True, alpha=0.3)
        ax.legend(loc='upper right', fontsize=10)

        self._finish(fig, save_path, show, "Convergence plot")
        return fig
