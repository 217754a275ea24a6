"""Shared test fixtures."""

import numpy as np
import pytest

from parmox.core.topology import Atom, Bond, Residue, ResidueEnd
from parmox.physics.force_fields import (
    AngleBendingParams,
    BondStretchingParams,
    ChargeParams,
    DihedralParams,
    ForceFieldParamsKeyed,
    MassParams,
    ProteinChargeTable,
    VdwParams,
)


def make_atom(serial, element, ff_type=None, posit=None, **kwargs):
    """Build an Atom with an optional position given as a plain list."""
    return Atom(
        serial_number=serial,
        element=element,
        posit=None if posit is None else np.array(posit, dtype=np.float64),
        force_field_type=ff_type,
        **kwargs,
    )


def chain_bonds(n):
    """Bonds of a linear chain 0-1-...-(n-1)."""
    return [Bond(i, i + 1) for i in range(n - 1)]


@pytest.fixture
def alkane_params() -> ForceFieldParamsKeyed:
    """Keyed parameters covering saturated carbons and their hydrogens."""
    return ForceFieldParamsKeyed(
        mass={
            "CT": MassParams("CT", 12.01),
            "HC": MassParams("HC", 1.008),
            "C": MassParams("C", 12.01),
            "O": MassParams("O", 16.0),
            "N": MassParams("N", 14.01),
        },
        van_der_waals={
            "CT": VdwParams("CT", 1.908, 0.1094),
            "HC": VdwParams("HC", 1.487, 0.0157),
            "C": VdwParams("C", 1.908, 0.086),
            "O": VdwParams("O", 1.6612, 0.21),
            "N": VdwParams("N", 1.824, 0.17),
        },
        bond={
            ("CT", "CT"): BondStretchingParams(("CT", "CT"), 310.0, 1.526),
            ("CT", "HC"): BondStretchingParams(("CT", "HC"), 340.0, 1.09),
        },
        angle={
            ("CT", "CT", "CT"): AngleBendingParams(("CT", "CT", "CT"), 40.0, 1.9111),
            ("HC", "CT", "HC"): AngleBendingParams(("HC", "CT", "HC"), 35.0, 1.8911),
            ("CT", "CT", "HC"): AngleBendingParams(("CT", "CT", "HC"), 50.0, 1.9111),
        },
        dihedral={
            ("X", "CT", "CT", "X"): DihedralParams(
                ("X", "CT", "CT", "X"),
                divider=9,
                barrier_height=1.4,
                phase=0.0,
                periodicity=3,
            ),
            ("HC", "CT", "CT", "HC"): DihedralParams(
                ("HC", "CT", "CT", "HC"),
                divider=1,
                barrier_height=0.15,
                phase=0.0,
                periodicity=3,
            ),
        },
    )


@pytest.fixture
def pentane_atoms() -> list[Atom]:
    """Five CT atoms on a straight line, 1.5 A apart."""
    return [make_atom(i + 1, "C", "CT", [1.5 * i, 0.0, 0.0]) for i in range(5)]


@pytest.fixture
def pentane_bonds() -> list[Bond]:
    return chain_bonds(5)


def _entries(*rows):
    return [ChargeParams(name, ff_type, charge) for name, ff_type, charge in rows]


_BACKBONE = (
    ("N", "N", -0.4157),
    ("H", "H", 0.2719),
    ("C", "C", 0.5973),
    ("O", "O", -0.5679),
)


@pytest.fixture
def charge_table() -> ProteinChargeTable:
    """Trimmed amino19-style templates for ALA, ASP, GLY and HID."""
    internal = {
        "ALA": _entries(
            *_BACKBONE,
            ("CA", "CX", 0.0337),
            ("HA", "H1", 0.0823),
            ("CB", "CT", -0.1825),
            ("HB1", "HC", 0.0603),
            ("HB2", "HC", 0.0603),
            ("HB3", "HC", 0.0603),
        ),
        "ASP": _entries(
            *_BACKBONE,
            ("CA", "CX", 0.0381),
            ("HA", "H1", 0.0880),
            ("CB", "2C", -0.0303),
            ("HB2", "HC", -0.0122),
            ("HB3", "HC", -0.0122),
            ("CG", "CO", 0.7994),
            ("OD1", "O2", -0.8014),
            ("OD2", "O2", -0.8014),
        ),
        "GLY": _entries(
            *_BACKBONE,
            ("CA", "CX", -0.0252),
            ("HA2", "H1", 0.0698),
            ("HA3", "H1", 0.0698),
        ),
        "HID": _entries(
            *_BACKBONE,
            ("CA", "CX", 0.0188),
            ("HA", "H1", 0.0881),
            ("CB", "CT", -0.0462),
            ("HB2", "HC", 0.0402),
            ("HB3", "HC", 0.0402),
            ("ND1", "NA", -0.3811),
            ("HD1", "H", 0.3649),
        ),
    }
    n_terminus = {
        "ALA": _entries(
            ("N", "N3", 0.1414),
            ("H1", "H", 0.1997),
            ("H2", "H", 0.1997),
            ("H3", "H", 0.1997),
            ("CA", "CX", 0.0962),
            ("HA", "HP", 0.0889),
            ("CB", "CT", -0.0597),
            ("HB1", "HC", 0.03),
            ("HB2", "HC", 0.03),
            ("HB3", "HC", 0.03),
            ("C", "C", 0.6163),
            ("O", "O", -0.5722),
        ),
    }
    c_terminus = {
        "ALA": _entries(
            ("N", "N", -0.3821),
            ("H", "H", 0.2681),
            ("CA", "CX", -0.1747),
            ("HA", "H1", 0.1067),
            ("CB", "CT", -0.2093),
            ("HB1", "HC", 0.0764),
            ("HB2", "HC", 0.0764),
            ("HB3", "HC", 0.0764),
            ("C", "C", 0.7731),
            ("O", "O2", -0.8055),
            ("OXT", "O2", -0.8055),
        ),
    }
    return ProteinChargeTable(internal=internal, n_terminus=n_terminus, c_terminus=c_terminus)


@pytest.fixture
def ala_fragment() -> tuple[list[Atom], list[Bond], list[Residue]]:
    """Heavy atoms of an internal alanine (N, CA, CB, C, O) plus one water oxygen."""
    names = [("N", "N"), ("CA", "C"), ("CB", "C"), ("C", "C"), ("O", "O")]
    posits = [
        [0.0, 0.0, 0.0],
        [1.458, 0.0, 0.0],
        [1.95, -1.4, 0.0],
        [2.0, 1.42, 0.0],
        [1.25, 2.4, 0.0],
    ]
    atoms = [
        make_atom(i + 1, element, posit=posits[i], type_in_res=name, residue=0)
        for i, (name, element) in enumerate(names)
    ]
    atoms.append(make_atom(6, "O", posit=[8.0, 8.0, 8.0], residue=1, hetero=True))
    bonds = [Bond(0, 1), Bond(1, 2), Bond(1, 3), Bond(3, 4)]
    residues = [
        Residue(serial_number=1, res_type="ALA", atoms=[0, 1, 2, 3, 4]),
        Residue(serial_number=2, res_type=None, atoms=[5], end=ResidueEnd.HETERO),
    ]
    return atoms, bonds, residues
