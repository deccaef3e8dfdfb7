"""
Loader for simple triangle mesh files.

Reads the vertex/face subset of the Wavefront OBJ format:
- Vertices: `v x y z`
- Faces: `f i j k` with 1-based indices (`i/t/n` tokens use the first
  index, negative indices count back from the last vertex)

Comments (`#`) and blank lines are ignored, as is any other record type.
Polygons with more than three vertices are split into a triangle fan.
"""

from __future__ import annotations
import logging
from pathlib import Path
from typing import List, Optional, Tuple, Union

from .vec3 import Vec3, Point3
from .shapes import TriangleMesh
from .materials import Material

logger = logging.getLogger(__name__)


class MeshLoadError(Exception):
    """Error while reading a mesh file."""
    pass


class MeshLoader:
    """Parser for mesh files."""

    def __init__(self):
        self.vertices: List[Point3] = []
        self.faces: List[Tuple[int, int, int]] = []

    def load(
        self,
        filename: Union[str, Path],
        material: Optional[Material] = None,
        scale: float = 1.0,
        offset: Optional[Vec3] = None
    ) -> TriangleMesh:
        """Load a mesh file.

        Args:
            filename: Path to the mesh file
            material: Material shared by all faces
            scale: Uniform scale applied to every vertex
            offset: Translation applied after scaling

        Returns:
            TriangleMesh with 0-based face indices

        Raises:
            FileNotFoundError: If the file does not exist
            MeshLoadError: On malformed lines or out-of-range indices
        """
        path = Path(filename)
        if not path.exists():
            raise FileNotFoundError(f"Mesh file not found: {filename}")

        with open(path, 'r') as f:
            mesh = self.parse(f, material, scale, offset, source=str(path))

        logger.debug("Loaded %s: %d vertices, %d faces", path, mesh.nverts, mesh.nfaces)
        return mesh

    def parse(
        self,
        lines,
        material: Optional[Material] = None,
        scale: float = 1.0,
        offset: Optional[Vec3] = None,
        source: str = '<string>'
    ) -> TriangleMesh:
        """Parse mesh records from an iterable of lines."""
        self.vertices = []
        self.faces = []
        pending: List[Tuple[int, List[int]]] = []

        for line_num, line in enumerate(lines, 1):
            line = line.strip()

            # Skip empty lines and comments
            if not line or line.startswith('#'):
                continue

            parts = line.split()
            cmd = parts[0]

            if cmd == 'v':
                if len(parts) < 4:
                    raise MeshLoadError(f"{source}:{line_num}: vertex needs 3 coordinates")
                try:
                    x, y, z = float(parts[1]), float(parts[2]), float(parts[3])
                except ValueError as e:
                    raise MeshLoadError(f"{source}:{line_num}: {e}") from e
                self.vertices.append(Point3(x, y, z) * scale)

            elif cmd == 'f':
                if len(parts) < 4:
                    raise MeshLoadError(f"{source}:{line_num}: face needs at least 3 vertices")
                try:
                    indices = [int(token.split('/')[0]) for token in parts[1:]]
                except ValueError as e:
                    raise MeshLoadError(f"{source}:{line_num}: {e}") from e
                # Negative indices depend on the vertices read so far
                pending.append((line_num, self._resolve(indices, line_num, source)))

        for line_num, indices in pending:
            for idx in indices:
                if idx >= len(self.vertices):
                    raise MeshLoadError(
                        f"{source}:{line_num}: vertex index {idx + 1} out of range "
                        f"({len(self.vertices)} vertices)"
                    )
            self.faces.extend(self._triangulate(indices))

        vertices = self.vertices
        if offset is not None:
            vertices = [v + offset for v in vertices]

        return TriangleMesh(vertices, self.faces, material)

    def _resolve(self, indices: List[int], line_num: int, source: str) -> List[int]:
        """Convert 1-based (or negative relative) indices to 0-based."""
        resolved = []
        for idx in indices:
            if idx > 0:
                resolved.append(idx - 1)
            elif idx < 0 and len(self.vertices) + idx >= 0:
                resolved.append(len(self.vertices) + idx)
            else:
                raise MeshLoadError(f"{source}:{line_num}: invalid vertex index {idx}")
        return resolved

    @staticmethod
    def _triangulate(indices: List[int]) -> List[Tuple[int, int, int]]:
        """Fan-triangulate a polygon."""
        return [
            (indices[0], indices[k], indices[k + 1])
            for k in range(1, len(indices) - 1)
        ]


def load_mesh(
    filename: Union[str, Path],
    material: Optional[Material] = None,
    scale: float = 1.0,
    offset: Optional[Vec3] = None
) -> TriangleMesh:
    """Convenience function to load a mesh file.

    Args:
        filename: Path to the mesh file
        material: Material shared by all faces
        scale: Uniform scale applied to every vertex
        offset: Translation applied after scaling

    Returns:
        TriangleMesh
    """
    return MeshLoader().load(filename, material, scale, offset)


def parse_mesh(text: str, material: Optional[Material] = None) -> TriangleMesh:
    """Parse a mesh from a string."""
    return MeshLoader().parse(text.splitlines(), material)
