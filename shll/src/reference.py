"""
Exact solution of the Riemann problem for the 1D Euler equations.

Used to validate the shock tube results. The star-region pressure is found
by Newton iteration on the pressure function (Toro, ch. 4); the solution
is then sampled along x/t.
"""

import numpy as np
from typing import Tuple


def _pressure_function(p: float, rho_k: float, p_k: float, a_k: float,
                       gamma: float) -> Tuple[float, float]:
    """Pressure function f_K and its derivative for one side of the problem."""
    gm1 = gamma - 1
    gp1 = gamma + 1

    if p > p_k:
        # Shock
        A = 2 / (gp1 * rho_k)
        B = gm1 / gp1 * p_k
        root = np.sqrt(A / (p + B))
        f = (p - p_k) * root
        df = root * (1 - 0.5 * (p - p_k) / (p + B))
    else:
        # Rarefaction
        ratio = p / p_k
        f = 2 * a_k / gm1 * (ratio**(gm1 / (2 * gamma)) - 1)
        df = 1 / (rho_k * a_k) * ratio**(-gp1 / (2 * gamma))
    return f, df


def star_state(left: Tuple[float, float, float], right: Tuple[float, float, float],
               gamma: float = 1.4, tol: float = 1e-12,
               max_iter: int = 100) -> Tuple[float, float]:
    """
    Pressure and velocity of the star region.

    Args:
        left, right: (rho, u, p) either side of the discontinuity

    Returns:
        (p_star, u_star)
    """
    rho_L, u_L, p_L = left
    rho_R, u_R, p_R = right
    a_L = np.sqrt(gamma * p_L / rho_L)
    a_R = np.sqrt(gamma * p_R / rho_R)

    if 2 * (a_L + a_R) / (gamma - 1) <= u_R - u_L:
        raise ValueError("Initial data generate a vacuum")

    p_star = 0.5 * (p_L + p_R)
    for _ in range(max_iter):
        f_L, df_L = _pressure_function(p_star, rho_L, p_L, a_L, gamma)
        f_R, df_R = _pressure_function(p_star, rho_R, p_R, a_R, gamma)

        p_new = p_star - (f_L + f_R + (u_R - u_L)) / (df_L + df_R)
        p_new = max(tol, p_new)  # Ensure positive

        converged = abs(p_new - p_star) / (0.5 * (p_new + p_star)) < tol
        p_star = p_new
        if converged:
            break

    f_L, _ = _pressure_function(p_star, rho_L, p_L, a_L, gamma)
    f_R, _ = _pressure_function(p_star, rho_R, p_R, a_R, gamma)
    u_star = 0.5 * (u_L + u_R) + 0.5 * (f_R - f_L)
    return p_star, u_star


def exact_riemann_solution(x: np.ndarray, t: float, left: Tuple[float, float, float],
                           right: Tuple[float, float, float], gamma: float = 1.4,
                           x0: float = 0.5) -> dict:
    """
    Exact solution of a Riemann problem.

    Args:
        x: Position array
        t: Time
        left, right: (rho, u, p) either side of the initial discontinuity
        gamma: Specific heat ratio
        x0: Position of the initial discontinuity

    Returns:
        Dictionary with exact solution: rho, u, p, e
    """
    rho_L, u_L, p_L = left
    rho_R, u_R, p_R = right
    a_L = np.sqrt(gamma * p_L / rho_L)
    a_R = np.sqrt(gamma * p_R / rho_R)

    gm1 = gamma - 1
    gp1 = gamma + 1

    p_star, u_star = star_state(left, right, gamma)

    x = np.asarray(x, dtype=float)
    rho = np.zeros_like(x)
    u = np.zeros_like(x)
    p = np.zeros_like(x)

    for i, xi in enumerate(x):
        s = (xi - x0) / t if t > 0 else (-np.inf if xi < x0 else np.inf)

        if s <= u_star:
            # Left of the contact
            ratio = p_star / p_L
            if p_star > p_L:
                S_L = u_L - a_L * np.sqrt(gp1 / (2 * gamma) * ratio + gm1 / (2 * gamma))
                if s <= S_L:
                    rho[i], u[i], p[i] = rho_L, u_L, p_L
                else:
                    rho[i] = rho_L * (ratio + gm1 / gp1) / (gm1 / gp1 * ratio + 1)
                    u[i], p[i] = u_star, p_star
            else:
                head = u_L - a_L
                tail = u_star - a_L * ratio**(gm1 / (2 * gamma))
                if s <= head:
                    rho[i], u[i], p[i] = rho_L, u_L, p_L
                elif s > tail:
                    rho[i] = rho_L * ratio**(1 / gamma)
                    u[i], p[i] = u_star, p_star
                else:
                    # Left rarefaction fan
                    c = 2 / gp1 * (a_L + 0.5 * gm1 * (u_L - s))
                    u[i] = 2 / gp1 * (a_L + 0.5 * gm1 * u_L + s)
                    rho[i] = rho_L * (c / a_L)**(2 / gm1)
                    p[i] = p_L * (c / a_L)**(2 * gamma / gm1)
        else:
            # Right of the contact
            ratio = p_star / p_R
            if p_star > p_R:
                S_R = u_R + a_R * np.sqrt(gp1 / (2 * gamma) * ratio + gm1 / (2 * gamma))
                if s >= S_R:
                    rho[i], u[i], p[i] = rho_R, u_R, p_R
                else:
                    rho[i] = rho_R * (ratio + gm1 / gp1) / (gm1 / gp1 * ratio + 1)
                    u[i], p[i] = u_star, p_star
            else:
                head = u_R + a_R
                tail = u_star + a_R * ratio**(gm1 / (2 * gamma))
                if s >= head:
                    rho[i], u[i], p[i] = rho_R, u_R, p_R
                elif s < tail:
                    rho[i] = rho_R * ratio**(1 / gamma)
                    u[i], p[i] = u_star, p_star
                else:
                    # Right rarefaction fan
                    c = 2 / gp1 * (a_R - 0.5 * gm1 * (u_R - s))
                    u[i] = 2 / gp1 * (-a_R + 0.5 * gm1 * u_R + s)
                    rho[i] = rho_R * (c / a_R)**(2 / gm1)
                    p[i] = p_R * (c / a_R)**(2 * gamma / gm1)

    # Compute internal energy
    e = p / (gm1 * rho)

    return {
        'rho': rho,
        'u': u,
        'p': p,
        'e': e
    }
