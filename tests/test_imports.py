# test_imports.py
import openran_tco


def test_package_importable():
    assert openran_tco.__path__


def test_public_entry_points_importable():
    from openran_tco.cli.main import app
    from openran_tco.config.loader import load_scenario
    from openran_tco.core.engine import compute, compute_scenario
    from openran_tco.core.sweep import run_sweep
    from openran_tco.storage.repository import ComputedFactRepository

    assert callable(compute)
    assert callable(compute_scenario)
    assert callable(run_sweep)
    assert callable(load_scenario)
    assert app is not None
    assert ComputedFactRepository is not None
