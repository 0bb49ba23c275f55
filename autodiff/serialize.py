# autodiff/serialize.py
"""
Round-trip serialization of scalars, vectors and matrices.

`to_dict` produces plain Python containers and `dumps` their JSON text.
Values, gradients and Hessians are written with full float precision, and
NaN / Inf use the JSON extensions of the standard `json` module, so
`loads(dumps(x))` reproduces x bit for bit.
"""
import json
from typing import Any, Dict

import numpy as np

from .core.const import ConstScalar
from .core.scalar import Scalar
from .core.types import scalar_type
from .matrix.base import Matrix
from .matrix.dense import DenseMatrix
from .matrix.sparse import SparseMatrix
from .vector.base import Vector
from .vector.dense import DenseVector
from .vector.sparse import SparseVector


def _scalar_payload(s: ConstScalar) -> Dict[str, Any]:
    d = {"value": s.val}
    if s.grad is not None:
        d["gradient"] = np.asarray(s.grad).tolist()
    if s.hess is not None:
        d["hessian"] = np.asarray(s.hess).ravel().tolist()
    return d


def _scalar_from_payload(d: Dict[str, Any], stype) -> Scalar:
    s = Scalar(d["value"], stype)
    g = d.get("gradient")
    if g is not None and stype.max_order > 0:
        n = len(g)
        s.alloc(n, 2 if "hessian" in d else 1)
        s.grad[:] = g
        if s.hess is not None:
            s.hess[:, :] = np.reshape(d["hessian"], (n, n))
    return s


def to_dict(obj) -> Dict[str, Any]:
    """Plain-container representation of a scalar, vector or matrix."""
    if isinstance(obj, ConstScalar):
        d = {"type": "scalar", "stype": obj.stype.name}
        d.update(_scalar_payload(obj))
        return d
    if isinstance(obj, SparseVector):
        return {"type": "sparse_vector", "stype": obj.stype.name, "n": obj.dim(),
                "indices": list(obj.support()),
                "values": [_scalar_payload(obj.const_at(i)) for i in obj.support()]}
    if isinstance(obj, Vector):
        return {"type": "dense_vector", "stype": obj.stype.name, "n": obj.dim(),
                "values": [_scalar_payload(s) for s in obj]}
    if isinstance(obj, Matrix):
        kind = "sparse_matrix" if isinstance(obj, SparseMatrix) else "dense_matrix"
        rows, cols = obj.dims()
        # views are written in plain row-major layout
        return {"type": kind, "rows": rows, "cols": cols,
                "vector": to_dict(obj.clone().as_vector())}
    raise TypeError(f"cannot serialize object of type {type(obj)}")


def from_dict(d: Dict[str, Any]):
    kind = d["type"]
    if kind == "scalar":
        return _scalar_from_payload(d, scalar_type(d["stype"]))
    if kind == "dense_vector":
        stype = scalar_type(d["stype"])
        return DenseVector([_scalar_from_payload(p, stype) for p in d["values"]], stype)
    if kind == "sparse_vector":
        stype = scalar_type(d["stype"])
        r = SparseVector(d["n"], stype)
        for i, p in zip(d["indices"], d["values"]):
            r._insert(i, _scalar_from_payload(p, stype))
        return r
    if kind == "dense_matrix":
        v = from_dict(d["vector"])
        return DenseMatrix(v._elements, d["rows"], d["cols"], v.stype)
    if kind == "sparse_matrix":
        return SparseMatrix(from_dict(d["vector"]), d["rows"], d["cols"])
    raise ValueError(f"unknown object type {kind!r}")


def dumps(obj, **kwargs) -> str:
    return json.dumps(to_dict(obj), **kwargs)


def loads(s: str):
    return from_dict(json.loads(s))
