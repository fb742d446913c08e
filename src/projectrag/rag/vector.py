"""Fixed-dimension embedding vectors and cosine similarity."""

import math
from typing import Any, Sequence, Union

from pydantic import BaseModel, ConfigDict, field_validator, model_validator

from projectrag.exceptions import DimensionMismatch


class Vector(BaseModel):
    """An immutable embedding vector.

    The dimension is fixed at construction. Values must be finite; an empty
    vector is rejected, absence of an embedding is expressed as ``None`` by
    the owning model instead.
    """

    model_config = ConfigDict(frozen=True)

    values: tuple[float, ...]

    def __init__(self, values: Sequence[float], **data):
        super().__init__(values=tuple(values), **data)

    @model_validator(mode="before")
    @classmethod
    def _from_sequence(cls, data: Any) -> Any:
        # Stored embeddings are plain float lists.
        if isinstance(data, (list, tuple)):
            return {"values": tuple(data)}
        return data

    @field_validator("values", mode="before")
    @classmethod
    def _check_numbers(cls, values: Any) -> Any:
        # No lax coercion of bools or numeric strings.
        if isinstance(values, (list, tuple)):
            for v in values:
                if isinstance(v, bool) or not isinstance(v, (int, float)):
                    raise ValueError(f"Vector values must be numbers, got {type(v).__name__}")
            return tuple(float(v) for v in values)
        return values

    @field_validator("values")
    @classmethod
    def _check_values(cls, values: tuple[float, ...]) -> tuple[float, ...]:
        if not values:
            raise ValueError("Vector must have at least one dimension")
        if not all(math.isfinite(v) for v in values):
            raise ValueError("Vector values must be finite")
        return values

    @property
    def dimension(self) -> int:
        return len(self.values)

    @property
    def norm(self) -> float:
        scale, scaled = _rescale(self.values)
        if scale == 0:
            return 0.0
        return scale * math.sqrt(math.fsum(v * v for v in scaled))

    def dot(self, other: "Vector") -> float:
        if other.dimension != self.dimension:
            raise DimensionMismatch(self.dimension, other.dimension)
        return math.fsum(x * y for x, y in zip(self.values, other.values))

    def to_list(self) -> list[float]:
        return list(self.values)

    def __len__(self) -> int:
        return len(self.values)

    def __repr__(self) -> str:
        preview = ", ".join(f"{v:.4f}" for v in self.values[:3])
        suffix = ", ..." if self.dimension > 3 else ""
        return f"Vector(dim={self.dimension}, [{preview}{suffix}])"


VectorLike = Union[Vector, Sequence[float]]


def _as_values(v: VectorLike) -> tuple[float, ...]:
    if isinstance(v, Vector):
        return v.values
    return tuple(v)


def _rescale(values: tuple[float, ...]) -> tuple[float, tuple[float, ...]]:
    """Divide by the largest magnitude so squares neither underflow nor overflow."""
    scale = max((abs(v) for v in values), default=0.0)
    if scale == 0:
        return 0.0, values
    return scale, tuple(v / scale for v in values)


def cosine_similarity(a: VectorLike, b: VectorLike) -> float:
    """Calculate cosine similarity between two vectors.

    Vectors of different dimension and zero-magnitude vectors score 0.0, so
    the result is always a finite float in [-1, 1]. Each vector is rescaled
    by its largest component first, which leaves the cosine unchanged.
    """
    a_values, b_values = _as_values(a), _as_values(b)
    if len(a_values) != len(b_values) or not a_values:
        return 0.0
    a_scale, a_values = _rescale(a_values)
    b_scale, b_values = _rescale(b_values)
    if a_scale == 0 or b_scale == 0:
        return 0.0
    dot_product = math.fsum(x * y for x, y in zip(a_values, b_values))
    norm_a = math.sqrt(math.fsum(x * x for x in a_values))
    norm_b = math.sqrt(math.fsum(y * y for y in b_values))
    if norm_a == 0 or norm_b == 0:
        return 0.0
    similarity = dot_product / (norm_a * norm_b)
    if not math.isfinite(similarity):
        return 0.0
    return max(-1.0, min(1.0, similarity))
