#!/usr/bin/env python3

# Copyright (C) The btchd developers
#
# This file is part of btchd. It is subject to the license terms in the
# LICENSE file found in the top-level directory of this distribution.
#
# No part of btchd including this file, may be copied, modified, propagated,
# or distributed except according to the terms contained in the LICENSE file.

"""Elliptic curve y^2 = x^3 + b (mod p) of prime order n.

Only Koblitz-like curves with a = 0 are modelled, which is all that
secp256k1 needs. Group operations are carried out in Jacobian
coordinates (X, Y, Z), with x = X/Z^2 and y = Y/Z^3, so that a single
modular inversion is needed when going back to affine coordinates.

Formulas are add-1998-cmo-2 and dbl-2009-l from
https://hyperelliptic.org/EFD/g1p/auto-shortw-jacobian-0.html
"""

from typing import Optional

from btchd.alias import INF, INFJ, JacPoint, Point
from btchd.ecc.number_theory import mod_inv, mod_sqrt
from btchd.exceptions import BTChdTypeError, BTChdValueError
from btchd.utils import hex_string


class Curve:
    "Prime order elliptic curve with a = 0 and generator G."

    def __init__(self, name: str, p: int, b: int, G: Point, n: int) -> None:

        self.name = name
        self.p = p
        self.b = b % p
        # field element and scalar sizes in bytes
        self.p_size = (p.bit_length() + 7) // 8
        self.n_size = (n.bit_length() + 7) // 8
        self.n = n
        self.G = G
        self.require_on_curve(G)

    def __repr__(self) -> str:
        return f"Curve({self.name})"

    def _y2(self, x: int) -> int:
        return (x * x * x + self.b) % self.p

    def y(self, x: int) -> int:
        "Return one of the two y coordinates of the points with abscissa x."

        if not 0 <= x < self.p:
            raise BTChdValueError(f"x-coordinate not in 0..p-1: {hex_string(x)}")
        try:
            return mod_sqrt(self._y2(x), self.p)
        except BTChdValueError as e:
            raise BTChdValueError(f"invalid x-coordinate: {hex_string(x)}") from e

    def y_even(self, x: int) -> int:
        "Return the even y coordinate of the point with abscissa x."
        y = self.y(x)
        return y if y % 2 == 0 else self.p - y

    def is_on_curve(self, Q: Point) -> bool:
        if len(Q) != 2:
            raise BTChdTypeError("point must be a tuple[int, int]")
        # the infinity point has no affine representation: (_, 0) stands for it
        if Q[1] == 0:
            return True
        if not 0 < Q[1] < self.p:
            raise BTChdValueError(f"y-coordinate not in 1..p-1: '{hex_string(Q[1])}'")
        return Q[1] * Q[1] % self.p == self._y2(Q[0])

    def require_on_curve(self, Q: Point) -> None:
        if not self.is_on_curve(Q):
            raise BTChdValueError("point not on curve")

    # Jacobian coordinates

    def to_jac(self, Q: Point) -> JacPoint:
        return INFJ if Q[1] == 0 else (Q[0], Q[1], 1)

    def to_aff(self, Q: JacPoint) -> Point:
        if Q[2] == 0:
            return INF
        z_inv = mod_inv(Q[2], self.p)
        z_inv2 = z_inv * z_inv % self.p
        return Q[0] * z_inv2 % self.p, Q[1] * z_inv2 * z_inv % self.p

    def double_jac(self, Q: JacPoint) -> JacPoint:
        X1, Y1, Z1 = Q
        p = self.p

        A = X1 * X1 % p
        B = Y1 * Y1 % p
        C = B * B % p
        D = 2 * ((X1 + B) * (X1 + B) - A - C) % p
        E = 3 * A % p

        X3 = (E * E - 2 * D) % p
        Y3 = (E * (D - X3) - 8 * C) % p
        Z3 = 2 * Y1 * Z1 % p
        return X3, Y3, Z3

    def add_jac(self, Q: JacPoint, R: JacPoint) -> JacPoint:
        if Q[2] == 0:
            return R
        if R[2] == 0:
            return Q

        X1, Y1, Z1 = Q
        X2, Y2, Z2 = R
        p = self.p

        Z1Z1 = Z1 * Z1 % p
        Z2Z2 = Z2 * Z2 % p
        U1 = X1 * Z2Z2 % p
        U2 = X2 * Z1Z1 % p
        S1 = Y1 * Z2 * Z2Z2 % p
        S2 = Y2 * Z1 * Z1Z1 % p

        if U1 == U2:
            return self.double_jac(Q) if S1 == S2 else INFJ

        H = (U2 - U1) % p
        r = (S2 - S1) % p
        HH = H * H % p
        HHH = H * HH % p
        V = U1 * HH % p

        X3 = (r * r - HHH - 2 * V) % p
        Y3 = (r * (V - X3) - S1 * HHH) % p
        Z3 = Z1 * Z2 * H % p
        return X3, Y3, Z3

    def add(self, Q: Point, R: Point) -> Point:
        "Return the sum of two curve points."

        self.require_on_curve(Q)
        self.require_on_curve(R)
        return self.to_aff(self.add_jac(self.to_jac(Q), self.to_jac(R)))


secp256k1 = Curve(
    "secp256k1",
    0xFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFEFFFFFC2F,
    7,
    (
        0x79BE667EF9DCBBAC55A06295CE870B07029BFCDB2DCE28D959F2815B16F81798,
        0x483ADA7726A3C4655DA4FBFC0E1108A8FD17B448A68554199C47D08FFB10D4B8,
    ),
    0xFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFEBAAEDCE6AF48A03BBFD25E8CD0364141,
)


def mult(m: int, Q: Optional[Point] = None, ec: Curve = secp256k1) -> Point:
    """Return the scalar multiplication m*Q.

    Q defaults to the curve generator and m is reduced mod n.
    Left-to-right double and add in Jacobian coordinates.
    """

    if Q is None:
        Q = ec.G
    else:
        ec.require_on_curve(Q)
    QJ = ec.to_jac(Q)

    R = INFJ
    for bit in bin(m % ec.n)[2:]:
        R = ec.double_jac(R)
        if bit == "1":
            R = ec.add_jac(R, QJ)
    return ec.to_aff(R)
