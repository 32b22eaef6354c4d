import matplotlib
matplotlib.use("Agg")

import numpy as np
import pandas as pd
import pytest


def synthetic_rows(n_frames=400):
    """Two stationary objects (x=100, x=1500) and one moving steadily right."""
    rows = []
    for f in range(1, n_frames + 1):
        rows.append((f, 100.0))
        rows.append((f, 200.0 + 2.5 * f))
        rows.append((f, 1500.0))
    return rows


@pytest.fixture
def synthetic_csv(tmp_path):
    path = tmp_path / "axon1.csv"
    df = pd.DataFrame(synthetic_rows(), columns=["ImageNumber", "AreaShape_Center_X"])
    # shuffle so the loader has to sort
    df = df.sample(frac=1.0, random_state=0)
    df.to_csv(path, index=False)
    return path


@pytest.fixture
def small_intervals(monkeypatch):
    from mitocount import config
    monkeypatch.setattr(config, "KYMO_SIZE", 100)
    monkeypatch.setattr(config, "DRUG_ADD", 100)
    monkeypatch.setattr(config, "PRINT_SUMMARY", False)
    return config
