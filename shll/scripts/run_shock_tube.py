"""
Run the shock tube with visualization and comparison to the exact solution.

This script demonstrates:
1. The reference run (1000 cells, 100 steps of dt = 3e-4)
2. Global Lax-Friedrichs against SHLL splitting
3. Comparison to the exact Riemann solution
4. Resolution study at fixed CFL

Run from the project root:
    python shll/scripts/run_shock_tube.py
"""

import sys
from pathlib import Path

# Add project root to path
project_root = Path(__file__).parent.parent.parent
if str(project_root) not in sys.path:
    sys.path.insert(0, str(project_root))

import logging
import numpy as np
import matplotlib.pyplot as plt
from shll.tests.shock_tube import run_shock_tube_test

SPLITTINGS = ['lax-friedrichs', 'shll']


def plot_shock_tube_results(results):
    """Density, velocity, pressure and internal energy of each run against the exact solution."""
    solver, exact = results[SPLITTINGS[0]]
    x = solver.mesh.x_cells
    t = solver.time

    fig, axes = plt.subplots(2, 2, figsize=(14, 10))
    fig.suptitle(f'Shock Tube: t = {t:.4f}, {solver.mesh.n_cells} cells', fontsize=14, fontweight='bold')

    panels = [
        (axes[0, 0], 'rho', 'Density'),
        (axes[0, 1], 'u', 'Velocity'),
        (axes[1, 0], 'p', 'Pressure'),
        (axes[1, 1], 'e', 'Specific Internal Energy'),
    ]
    for ax, key, label in panels:
        ax.plot(x, exact[key], 'k--', linewidth=2, label='Exact')
        for name, style in zip(SPLITTINGS, ['b-', 'r-']):
            state = results[name][0].get_state()
            ax.plot(x, getattr(state, key), style, linewidth=1.5, label=name)
        ax.set_xlabel('x')
        ax.set_ylabel(label)
        ax.set_title(label)
        ax.legend()
        ax.grid(True, alpha=0.3)
        ax.set_xlim([0.35, 0.65])
        ax.axvline(x=0.5, color='gray', linestyle=':', alpha=0.5)

    plt.tight_layout()
    plt.savefig('shock_tube_results.png', dpi=150, bbox_inches='tight')
    print("\nSaved plot to: shock_tube_results.png")

    return fig


def resolution_study(splitting='lax-friedrichs'):
    """Density L1 error at fixed CFL and final time."""

    print("\n" + "=" * 80)
    print(f"RESOLUTION STUDY ({splitting})")
    print("=" * 80)

    resolutions = [125, 250, 500, 1000, 2000]
    t_final = 0.03
    errors = []

    for n_cells in resolutions:
        steps = n_cells // 10
        solver, exact = run_shock_tube_test(n_cells=n_cells, steps=steps, dt=t_final / steps,
                                            splitting=splitting)
        errors.append(np.mean(np.abs(solver.get_state().rho - exact['rho'])))

    dx = 1.0 / np.array(resolutions)

    fig, ax = plt.subplots(figsize=(6, 5))
    ax.loglog(dx, errors, 'b-o', linewidth=2, label='L1 norm')
    ax.loglog(dx, errors[0] * (dx / dx[0]), 'k--', alpha=0.5, label='1st order')
    ax.loglog(dx, errors[0] * np.sqrt(dx / dx[0]), 'k:', alpha=0.5, label='order 1/2')
    ax.set_xlabel('Grid spacing Δx')
    ax.set_ylabel('Density error')
    ax.set_title('Density Error Convergence')
    ax.legend()
    ax.grid(True, alpha=0.3)
    ax.invert_xaxis()

    plt.tight_layout()
    plt.savefig('shock_tube_convergence.png', dpi=150, bbox_inches='tight')
    print("\nSaved convergence plot to: shock_tube_convergence.png")

    print(f"\n{'N cells':<10} {'Δx':<10} {'ρ L1':<12}")
    print("-" * 80)
    for n, h, err in zip(resolutions, dx, errors):
        print(f"{n:<10} {h:<10.5f} {err:<12.6f}")

    return errors


if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO,
                        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s")

    print("\n" + "=" * 80)
    print("SHOCK TUBE VALIDATION")
    print("=" * 80)

    results = {}
    for splitting in SPLITTINGS:
        solver, exact = run_shock_tube_test(splitting=splitting)
        rho_l1 = np.mean(np.abs(solver.get_state().rho - exact['rho']))
        print(f"{splitting:<16} density L1 error = {rho_l1:.5f}")
        results[splitting] = (solver, exact)

    print("\nGenerating plots...")
    plot_shock_tube_results(results)

    response = input("\nRun resolution study? [y/N]: ")
    if response.lower() == 'y':
        resolution_study()

    plt.show()
