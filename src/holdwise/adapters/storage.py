import json
from pathlib import Path
from typing import Any

import pandas as pd

from holdwise.domain.errors import InvalidInputError


def read_params(path: str) -> dict[str, Any]:
    with open(path, encoding="utf-8") as fh:
        try:
            data = json.load(fh)
        except json.JSONDecodeError as err:
            raise InvalidInputError("payload", f"{path} is not valid JSON ({err.msg}, line {err.lineno})") from err
    if not isinstance(data, dict):
        raise InvalidInputError("payload", f"{path}: expected a JSON object of property parameters")
    return data


def write_df(df: pd.DataFrame, path: str) -> None:
    Path(path).parent.mkdir(parents=True, exist_ok=True)
    if path.endswith(".parquet"):
        df.to_parquet(path)
    elif path.endswith(".json"):
        df.reset_index().to_json(path, orient="records", indent=2)
    else:
        df.to_csv(path)


def read_df(path: str) -> pd.DataFrame:
    if path.endswith(".parquet"):
        return pd.read_parquet(path)
    if path.endswith(".json"):
        return pd.read_json(path, orient="records")
    return pd.read_csv(path)
