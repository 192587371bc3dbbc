from .csv import from_dataframe, read_csv

__all__ = ["read_csv", "from_dataframe"]
