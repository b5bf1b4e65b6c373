"""Shared fixtures for batcamp tests."""

from __future__ import annotations

from pathlib import Path
from typing import Iterable, List

import pandas as pd
import pytest

from batcamp.config import ConfigBundle, load_config_bundle
from batcamp.workbook import normalize_columns


FIXTURE_CONFIG_DIR = Path(__file__).parent / "fixtures" / "configs"

MONITORING_HEADER = ["Date", "Location", "GHFF", "LRFF", "Trees Occupied", "Include"]


@pytest.fixture
def config() -> ConfigBundle:
    return load_config_bundle(FIXTURE_CONFIG_DIR)


@pytest.fixture
def config_dir() -> Path:
    return FIXTURE_CONFIG_DIR


def make_monitoring(rows: Iterable[list]) -> pd.DataFrame:
    return normalize_columns(pd.DataFrame(list(rows), columns=MONITORING_HEADER))


@pytest.fixture
def monitoring_frame():
    return make_monitoring


@pytest.fixture
def december_rows() -> List[list]:
    return [
        ["05/12/2023", "Maclean", 100, 0, 10, "Y"],
        ["12/12/2023", "Maclean", 200, 0, 20, "Y"],
        ["19/12/2023", "Maclean", 300, 0, 30, "Y"],
    ]


@pytest.fixture
def workbook_dir(tmp_path: Path) -> Path:
    """A CSV workbook covering one fiscal year with a June-September gap."""

    root = tmp_path / "workbook"
    root.mkdir()
    (root / "monitoring.csv").write_text(
        """Date,Location,GHFF,LRFF,Trees Occupied,Include
05/12/2023,Maclean,100,0,10,Y
12/12/2023,Maclean,200,0,20,Y
19/12/2023,Maclean,300,0,30,Y
10/01/2024,Maclean,800-1000,0,45,Y
14/02/2024,Maclean,200-250,0,0,Y
20/03/2024,Maclean,400,0,20,Y
18/04/2024,Maclean,50,0,5,Y
16/05/2024,Maclean,20,0,2,Y
10/10/2024,Maclean,600,0,30,Y
12/11/2024,Maclean,700,0,35,Y
12/11/2024,Grafton,5000,0,90,Y
15/11/2024,Maclean,9999,0,99,N
15/03/2022,Maclean,1500,0,40,Y
""",
        encoding="utf-8",
    )
    (root / "surveys.csv").write_text(
        """Survey ID,Date,1,2,3
S1,05/12/2023,120,999,10
S2,10/01/2024,450,60,
S3,10/10/2024,0,999,250
""",
        encoding="utf-8",
    )
    (root / "trees.csv").write_text(
        """Tree ID,Lat,Lon
1,-29.46,153.20
2,-29.47,153.21
""",
        encoding="utf-8",
    )
    (root / "weather.csv").write_text(
        """Year,Month,Day,Min,Max
2023,12,05,18.5,31.0
2023,12,06,19.0,33.5
2024,01,10,20.1,29.9
1999,01,01,10.0,20.0
""",
        encoding="utf-8",
    )
    return root
