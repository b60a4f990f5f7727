"""Exceptions raised for structurally invalid mesh input."""


class MeshError(ValueError):
    """Base exception for all meshforge precondition failures."""


class InvalidMeshError(MeshError):
    """Raised when a mesh breaks an index invariant (dangling or malformed)."""


class VertexCountMismatchError(MeshError):
    """Raised when two meshes must share a vertex list but do not.

    Attributes:
        verts0: Vertex count of the first mesh
        verts1: Vertex count of the second mesh
    """

    def __init__(self, verts0: int, verts1: int):
        self.verts0 = verts0
        self.verts1 = verts1
        super().__init__(
            f"Vertex count mismatch: first mesh has {verts0:,} vertices, "
            f"second mesh has {verts1:,}. Surface merging requires equal vertex counts."
        )
