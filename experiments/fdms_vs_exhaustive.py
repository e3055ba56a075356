"""FDMS vs Exhaustive Phase Change Point Experiment.

Generates random integer task sets at various utilisation levels using
UUniFast, gives them RM+RM priorities, and compares how often the FDMS
heuristic finds schedulable phase change points against how often any
phase change points exist (exhaustive search). Plots both ratios as a
function of utilisation.
"""

from pathlib import Path

try:
    import matplotlib
    matplotlib.use('Agg')  # Non-interactive backend
    import matplotlib.pyplot as plt
    MATPLOTLIB_AVAILABLE = True
except ImportError:
    MATPLOTLIB_AVAILABLE = False

from dualprio.fdms import try_fdms
from dualprio.generators import generate_taskset
from dualprio.models import DualPriorityConfig
from dualprio.search import search_phase_points


def run_fdms_experiment(
    utilisation_points: list,
    num_task_sets_per_point: int = 50,
    num_tasks: int = 3,
    min_period: int = 3,
    max_period: int = 12,
    seed: int = 42,
) -> dict:
    """Run the FDMS experiment across utilisation levels.

    Args:
        utilisation_points: List of utilisation values to test (e.g. [0.7, 0.8, 0.9]).
        num_task_sets_per_point: Number of random task sets to generate per utilisation.
        num_tasks: Number of tasks per task set.
        min_period: Minimum task period.
        max_period: Maximum task period.
        seed: Base random seed (will be varied per task set).

    Returns:
        Dictionary mapping utilisation -> (FDMS ratio, exhaustive ratio).
    """
    results = {}

    for u_total in utilisation_points:
        fdms_count = 0
        exhaustive_count = 0

        for i in range(num_task_sets_per_point):
            task_set_seed = seed + int(u_total * 1000) + i

            taskset = generate_taskset(
                n=num_tasks,
                target_utilization=u_total,
                period_min=min_period,
                period_max=max_period,
                seed=task_set_seed,
            )
            config = DualPriorityConfig.rm_plus_rm(taskset)

            if try_fdms(taskset, config):
                fdms_count += 1
                # FDMS success implies that schedulable phase points exist.
                exhaustive_count += 1
            elif search_phase_points(taskset, config):
                exhaustive_count += 1

        results[u_total] = (
            fdms_count / num_task_sets_per_point,
            exhaustive_count / num_task_sets_per_point,
        )

    return results


def plot_fdms_vs_exhaustive(
    results: dict,
    output_path: str = "results/fdms_vs_exhaustive.png",
) -> None:
    """Plot FDMS and exhaustive schedulability ratios vs utilisation.

    Args:
        results: Dictionary mapping utilisation -> (FDMS ratio, exhaustive ratio).
        output_path: Path to save the plot.
    """
    if not MATPLOTLIB_AVAILABLE:
        raise ImportError("matplotlib is required for plotting")

    output_dir = Path(output_path).parent
    output_dir.mkdir(parents=True, exist_ok=True)

    utilisations = sorted(results.keys())
    fdms_ratios = [results[u][0] for u in utilisations]
    exhaustive_ratios = [results[u][1] for u in utilisations]

    plt.figure(figsize=(10, 6))
    plt.plot(utilisations, exhaustive_ratios, 'bo-', linewidth=2, markersize=8,
             label='Exhaustive phase change points')
    plt.plot(utilisations, fdms_ratios, 'rs--', linewidth=2, markersize=8,
             label='FDMS')
    plt.xlabel('Total Utilisation', fontsize=12)
    plt.ylabel('Schedulability Ratio', fontsize=12)
    plt.title('Dual Priority Schedulability with RM+RM Priorities', fontsize=14)
    plt.grid(True, alpha=0.3)
    plt.ylim(0, 1.05)
    plt.legend()

    plt.savefig(output_path, dpi=150, bbox_inches='tight')
    plt.close()

    print(f"Plot saved to {output_path}")


def main():
    """Run the full FDMS vs exhaustive experiment."""
    print("Running FDMS vs exhaustive phase change point experiment...")

    utilisation_points = [u / 20.0 for u in range(14, 21)]  # 0.70, 0.75, ..., 1.0

    results = run_fdms_experiment(
        utilisation_points=utilisation_points,
        num_task_sets_per_point=100,
        num_tasks=3,
        min_period=3,
        max_period=12,
        seed=42,
    )

    print("\nResults:")
    for u, (fdms_ratio, exhaustive_ratio) in sorted(results.items()):
        print(f"  U = {u:.2f}: FDMS {fdms_ratio:.3f}, exhaustive {exhaustive_ratio:.3f}")

    plot_fdms_vs_exhaustive(results)

    print("\nExperiment complete!")


if __name__ == "__main__":
    main()
