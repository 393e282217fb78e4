"""Numba-accelerated reductions for the order parameters.

These are the compiled counterparts of the numpy reference code in
order.py and must agree with it to roundoff.

Note: This module requires numba to be installed. Functions will raise ImportError
if called without numba. Use backend.require_numba() to check availability before use.
"""

import numpy as np
from .backend import njit, NUMBA_AVAILABLE

if not NUMBA_AVAILABLE:
    # Importable without numba; the kernels fail clearly when called
    def _raise_numba_error():
        raise ImportError(
            "Numba is required for order-parameter kernels. "
            "Install with: pip install numba"
        )

    def density_fourier_component_numba(*args, **kwargs):
        _raise_numba_error()

    def p2_sum_numba(*args, **kwargs):
        _raise_numba_error()

    def order_tensor_numba(*args, **kwargs):
        _raise_numba_error()
else:
    @njit(cache=True)
    def density_fourier_component_numba(r, k_real):
        """Real and imaginary parts of (1/n) sum_j exp(i k.r_j).

        Args:
            r: Positions, shape (n, 3), float64
            k_real: Wave vector including the 2*pi factor, shape (3,)

        Returns:
            (re, im)
        """
        n = r.shape[0]
        re = 0.0
        im = 0.0
        for j in range(n):
            kr = k_real[0]*r[j, 0] + k_real[1]*r[j, 1] + k_real[2]*r[j, 2]
            re += np.cos(kr)
            im += np.sin(kr)
        return re / n, im / n

    @njit(cache=True)
    def p2_sum_numba(e, e0):
        """Sum of P2(e_i . e0[(i+1) % 4]) over all orientations.

        Args:
            e: Orientations, shape (n, 3), float64
            e0: Reference directions, shape (4, 3), float64
        """
        n = e.shape[0]
        total = 0.0
        for i in range(n):
            i0 = (i + 1) % 4
            c = e[i, 0]*e0[i0, 0] + e[i, 1]*e0[i0, 1] + e[i, 2]*e0[i0, 2]
            total += 1.5 * c * c - 0.5
        return total

    @njit(cache=True)
    def order_tensor_numba(e):
        """Traceless order tensor Q = (3/2n) sum e e^T - I/2.

        Args:
            e: Orientations, shape (n, 3), float64

        Returns:
            Q, shape (3, 3)
        """
        n = e.shape[0]
        s = np.zeros((3, 3))
        for i in range(n):
            for a in range(3):
                for b in range(3):
                    s[a, b] += e[i, a] * e[i, b]
        q = 1.5 * s / n
        for a in range(3):
            q[a, a] -= 0.5
        return q
