# Shared pytest fixtures
from __future__ import annotations

from pathlib import Path

import pandas as pd
import pytest

from ev_core.data import clear_cache


HEADER = ["VIN (1-10)", "County", "City", "State", "Model Year", "Make", "Model", "Electric Vehicle Type", "Electric Range"]

SAMPLE_ROWS = [
    ["5YJ3E1EB4L", "King", "Seattle", "WA", "2020", "TESLA", "MODEL 3", "Battery Electric Vehicle (BEV)", "322"],
    ["1N4AZ0CP8D", "King", "Bellevue", "WA", "2013", "NISSAN", "LEAF", "Battery Electric Vehicle (BEV)", "75"],
    ["KNDCE3LG2L", "Kitsap", "Bremerton", "WA", "2020", "KIA", "NIRO", "Plug-in Hybrid Electric Vehicle (PHEV)", "26"],
    ["5YJYGDEE1M", "King", "Kirkland", "WA", "2021", "TESLA", "MODEL Y", "Battery Electric Vehicle (BEV)", "0"],
    ["1G1FY6S07K", "Thurston", "Olympia", "WA", "2019", "CHEVROLET", "BOLT EV", "Battery Electric Vehicle (BEV)", "238"],
    ["JTDKARFP6J", "Yakima", "Yakima", "WA", "2018", "TOYOTA", "PRIUS PRIME", "Plug-in Hybrid Electric Vehicle (PHEV)", "25"],
    ["5YJ3E1EA7J", "Snohomish", "Everett", "WA", "2018", "TESLA", "MODEL 3", "Battery Electric Vehicle (BEV)", ""],
    ["WBY8P6C58K", "King", "Seattle", "WA", "2019", "BMW", "I3", "Battery Electric Vehicle (BEV)", "153"],
    ["1N4BZ1CP1K", "Pierce", "Tacoma", "WA", "2019", "NISSAN", "LEAF", "Battery Electric Vehicle (BEV)", "abc"],
    ["7SAYGDEE6N", "King", "Redmond", "WA", "2022", "TESLA", "MODEL Y", "Battery Electric Vehicle (BEV)", "0"],
    ["KM8K33AG1N", "Clark", "Vancouver", "WA", "", "", "KONA", "Battery Electric Vehicle (BEV)", "258"],
    ["1FADP5CU8E", "Spokane", "Spokane", "WA", "2014", "FORD", "C-MAX", "", "19"],
]


@pytest.fixture()
def ev_records() -> list[dict]:
    return [dict(zip(HEADER, values)) for values in SAMPLE_ROWS]


@pytest.fixture()
def ev_frame(ev_records: list[dict]) -> pd.DataFrame:
    return pd.DataFrame(ev_records, columns=HEADER, dtype=object)


@pytest.fixture()
def data_ctx(ev_frame: pd.DataFrame) -> dict:
    return {"files": ["Electric_Vehicle_Population_Data.csv"], "rows": ev_frame}


@pytest.fixture()
def ev_csv(tmp_path: Path, ev_frame: pd.DataFrame) -> Path:
    path = tmp_path / "Electric_Vehicle_Population_Data.csv"
    ev_frame.to_csv(path, index=False)
    yield path
    clear_cache()


@pytest.fixture()
def many_rows() -> list[dict]:
    return [{"Make": f"MAKE{i % 3}", "Model": f"M{i}", "Electric Range": str(i)} for i in range(25)]
