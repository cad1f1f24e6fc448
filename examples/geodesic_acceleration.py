#!/usr/bin/env python3
"""Geodesic acceleration from Christoffel symbols at a point.

For a particle with four-velocity u^a in a spacetime whose Christoffel
symbols at the particle's position are Gamma^a_bc, the geodesic equation
gives the coordinate acceleration::

    du^a/dtau = -Gamma^a_bc u^b u^c

This script fills Gamma with the nonzero symbols of the Schwarzschild
metric (G = c = 1) on the equatorial plane at radius r, contracts them
with a circular-orbit four-velocity and prints the result. For a circular
geodesic the radial acceleration vanishes.

Usage::

    python examples/geodesic_acceleration.py
"""

from __future__ import annotations

import logging

import numpy as np

from einjax import IndexType, Tensor, contract

T, R, THETA, PHI = range(4)


def schwarzschild_christoffel(mass: float, r: float) -> Tensor:
    """Nonzero Gamma^a_bc of Schwarzschild at theta = pi/2."""
    f = 1.0 - 2.0 * mass / r
    gamma = Tensor.from_string("^a_b_c")

    def set_sym(a: int, b: int, c: int, value: float) -> None:
        gamma.set_component((a, b, c), value)
        gamma.set_component((a, c, b), value)

    set_sym(T, T, R, mass / (r * r * f))
    gamma.set_component((R, T, T), mass * f / (r * r))
    gamma.set_component((R, R, R), -mass / (r * r * f))
    gamma.set_component((R, THETA, THETA), -r * f)
    gamma.set_component((R, PHI, PHI), -r * f)
    set_sym(THETA, R, THETA, 1.0 / r)
    set_sym(PHI, R, PHI, 1.0 / r)
    return gamma


def circular_orbit_velocity(mass: float, r: float) -> Tensor:
    """u^a for a circular equatorial geodesic (requires r > 3M)."""
    omega = np.sqrt(mass / r**3)
    u_t = 1.0 / np.sqrt(1.0 - 3.0 * mass / r)
    u = Tensor(1, [IndexType.UP])
    u.set_components([u_t, 0.0, 0.0, omega * u_t])
    return u


def main():
    logging.basicConfig(level=logging.INFO, format="%(name)s %(levelname)s: %(message)s")
    log = logging.getLogger("geodesic_acceleration")

    mass, r = 1.0, 10.0
    gamma = schwarzschild_christoffel(mass, r)
    u = circular_orbit_velocity(mass, r)

    accel = -1 * contract(gamma["abc"], u["b"], u["c"])
    log.info("result indices: %s", accel)
    for a, name in enumerate(("t", "r", "theta", "phi")):
        print(f"  du^{name}/dtau = {accel.get_component((a,)):+.3e}")


if __name__ == "__main__":
    main()
