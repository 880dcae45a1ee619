"""
Fleet serialization / deserialization.

Saves a fleet snapshot as a compressed NPZ archive: numeric fields as
column arrays, names and metadata as JSON strings.
"""

import io
import json
from typing import Any, Dict, List, Optional

import numpy as np

from models.pipeline import PipelineEntity

_NUMERIC_FIELDS = ("lat", "lon", "pressure_bar", "flow_m3h", "leak_prob")


def serialize_fleet(
    fleet: List[PipelineEntity],
    metadata: Optional[dict] = None,
) -> bytes:
    """Serialize a fleet to a compressed NPZ archive.

    Args:
        fleet: Pipeline entities, in order.
        metadata: Optional dict of extra metadata (e.g. seed, threshold).

    Returns:
        Bytes of the compressed NPZ archive.
    """
    save_dict: Dict[str, Any] = {
        "ids": np.array([p.id for p in fleet], dtype=np.int64),
        "names_json": np.array(json.dumps([p.name for p in fleet])),
    }
    for name in _NUMERIC_FIELDS:
        save_dict[name] = np.array([getattr(p, name) for p in fleet], dtype=float)

    if metadata:
        save_dict["metadata_json"] = np.array(json.dumps(metadata, default=str))

    buf = io.BytesIO()
    np.savez_compressed(buf, **save_dict)
    buf.seek(0)
    return buf.read()


def deserialize_fleet(data: bytes) -> dict:
    """Deserialize a fleet from NPZ bytes.

    Args:
        data: Bytes of a compressed NPZ archive.

    Returns:
        Dict with keys:
            'fleet': List[PipelineEntity] in original order
            'metadata': dict (may be empty)
    """
    buf = io.BytesIO(data)
    npz = np.load(buf, allow_pickle=False)

    names = json.loads(str(npz["names_json"]))
    ids = npz["ids"].tolist()
    columns = {name: npz[name].tolist() for name in _NUMERIC_FIELDS}

    fleet = [
        PipelineEntity(
            id=int(ids[i]),
            name=names[i],
            **{name: float(columns[name][i]) for name in _NUMERIC_FIELDS},
        )
        for i in range(len(ids))
    ]

    metadata = {}
    if "metadata_json" in npz:
        metadata = json.loads(str(npz["metadata_json"]))

    return {"fleet": fleet, "metadata": metadata}
