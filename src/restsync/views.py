"""Tabular views over a collection.

Returns :mod:`polars` DataFrames so a collection can be dropped straight
into a notebook table or an Altair chart::

    df = to_frame(tasks)
    df.filter(pl.col("done"))
"""

from __future__ import annotations

from typing import TYPE_CHECKING

import polars as pl

if TYPE_CHECKING:
    from restsync.collection import RecordCollection


def to_frame(collection: "RecordCollection", columns: list[str] | None = None) -> pl.DataFrame:
    """Snapshot *collection* as a DataFrame, one row per record.

    The identifier comes first (null for unsaved records), followed by every
    field name in the order it is first seen.  Records missing a field get a
    null in that column.
    """
    id_col = collection.id_attribute
    if columns is None:
        columns = [id_col]
        for record in collection:
            for name in record.fields:
                if name not in columns:
                    columns.append(name)

    rows = [
        {col: (record.id if col == id_col else record.fields.get(col)) for col in columns}
        for record in collection
    ]
    if not rows:
        return pl.DataFrame({col: [] for col in columns})
    return pl.DataFrame(rows, schema=columns, infer_schema_length=None)
