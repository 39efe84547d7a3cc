"""Data types for deck geometry generation."""

import logging
import math
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Sequence, Tuple

import numpy as np
import trimesh

from core.deck_spec.errors import InvalidSpecError

from .tally import MaterialTally

logger = logging.getLogger(__name__)

Point3D = Tuple[float, float, float]

# Flat RGBA colours used when no texture is available
MATERIAL_COLORS: Dict[str, Tuple[int, int, int, int]] = {
    "decking": (139, 69, 19, 255),
    "framing": (176, 136, 88, 255),
    "railing": (120, 84, 52, 255),
    "cable": (180, 180, 185, 255),
    "furniture": (96, 96, 96, 255),
}
FALLBACK_COLOR = (128, 128, 128, 255)

_Y_UP = np.array([0.0, 1.0, 0.0])


def hex_to_rgba(value: str) -> Tuple[int, int, int, int]:
    """Convert ``#rrggbb`` to an RGBA tuple, falling back to grey."""
    value = value.lstrip("#")
    if len(value) != 6:
        return FALLBACK_COLOR
    try:
        return (int(value[0:2], 16), int(value[2:4], 16), int(value[4:6], 16), 255)
    except ValueError:
        return FALLBACK_COLOR


@dataclass(frozen=True)
class FootprintSection:
    """A rectangular plan area of decking at one elevation.

    ``width`` is the X extent, ``length`` the Z extent; the offsets locate
    the section centre in world space.
    """

    name: str
    width: float
    length: float
    offset_x: float = 0.0
    offset_z: float = 0.0
    level_height: float = 1.0

    @property
    def area(self) -> float:
        return self.width * self.length

    @property
    def min_x(self) -> float:
        return self.offset_x - self.width / 2

    @property
    def max_x(self) -> float:
        return self.offset_x + self.width / 2

    @property
    def min_z(self) -> float:
        return self.offset_z - self.length / 2

    @property
    def max_z(self) -> float:
        return self.offset_z + self.length / 2

    def validate(self) -> None:
        """Raise InvalidSpecError if the section cannot be built."""
        for attr in ("width", "length", "level_height"):
            value = getattr(self, attr)
            if not (isinstance(value, (int, float)) and math.isfinite(value) and value > 0):
                raise InvalidSpecError(
                    f"Section '{self.name}' has non-positive {attr}: {value}",
                    section=self.name,
                )

    def overlaps(self, other: "FootprintSection") -> bool:
        """True if the plan rectangles share interior area."""
        eps = 1e-9
        return (
            self.min_x < other.max_x - eps
            and other.min_x < self.max_x - eps
            and self.min_z < other.max_z - eps
            and other.min_z < self.max_z - eps
        )

    def to_dict(self) -> dict:
        return {
            "name": self.name,
            "width": self.width,
            "length": self.length,
            "offset_x": self.offset_x,
            "offset_z": self.offset_z,
            "level_height": self.level_height,
        }


@dataclass(frozen=True)
class Primitive:
    """Positioned geometry descriptor handed to the renderer.

    Kinds:
        box: ``size`` holds the x/y/z extents.
        cylinder: ``radius`` and ``height`` along the local Y axis.
        tube: ``path`` is the world-space centre line, ``radius`` the section.
        sprite: a text ``label`` anchored at ``position``.

    ``rotation`` is an XYZ Euler triple in radians applied about the centre.
    """

    kind: str
    position: Point3D = (0.0, 0.0, 0.0)
    size: Point3D = (0.0, 0.0, 0.0)
    radius: float = 0.0
    height: float = 0.0
    path: Tuple[Point3D, ...] = ()
    rotation: Point3D = (0.0, 0.0, 0.0)
    material: str = "decking"
    element_type: str = "generic"  # boards, joists, rim_joists, posts, rails, ...
    source_id: str = ""  # Footprint section the primitive belongs to
    label: str = ""
    asset: str = ""

    @classmethod
    def box(cls, position: Sequence[float], size: Sequence[float], **kwargs) -> "Primitive":
        return cls(kind="box", position=_point(position), size=_point(size), **kwargs)

    @classmethod
    def cylinder(
        cls, position: Sequence[float], radius: float, height: float, **kwargs
    ) -> "Primitive":
        return cls(kind="cylinder", position=_point(position), radius=radius, height=height, **kwargs)

    @classmethod
    def cylinder_between(
        cls, start: Sequence[float], end: Sequence[float], radius: float, **kwargs
    ) -> "Primitive":
        """Cylinder whose axis runs from ``start`` to ``end``."""
        start_pt = np.asarray(start, dtype=float)
        end_pt = np.asarray(end, dtype=float)
        axis = end_pt - start_pt
        length = float(np.linalg.norm(axis))
        rotation = (0.0, 0.0, 0.0)
        if length > 1e-9:
            matrix = trimesh.geometry.align_vectors(_Y_UP, axis / length)
            rotation = _point(trimesh.transformations.euler_from_matrix(matrix, "sxyz"))
        return cls(
            kind="cylinder",
            position=_point((start_pt + end_pt) / 2),
            radius=radius,
            height=length,
            rotation=rotation,
            **kwargs,
        )

    @classmethod
    def tube(cls, path: Sequence[Sequence[float]], radius: float, **kwargs) -> "Primitive":
        points = tuple(_point(p) for p in path)
        centre = _point(np.mean(np.asarray(points), axis=0)) if points else (0.0, 0.0, 0.0)
        return cls(kind="tube", position=centre, path=points, radius=radius, **kwargs)

    @classmethod
    def sprite(cls, position: Sequence[float], label: str, **kwargs) -> "Primitive":
        kwargs.setdefault("material", "label")
        kwargs.setdefault("element_type", "dimensions")
        return cls(kind="sprite", position=_point(position), label=label, **kwargs)

    @property
    def transform(self) -> np.ndarray:
        """4x4 local-to-world transform (rotation then translation)."""
        matrix = trimesh.transformations.euler_matrix(*self.rotation, axes="sxyz")
        matrix[:3, 3] = self.position
        return matrix

    def to_trimesh(self, furniture_library=None) -> Optional[trimesh.Trimesh]:
        """Build a mesh for preview/export; sprites have no mesh."""
        if self.kind == "box":
            mesh = None
            if self.asset and furniture_library is not None:
                mesh = furniture_library.get_asset(self.asset)
                if mesh is not None:
                    # Library assets sit on y=0; move their base to ours
                    mesh = mesh.copy()
                    mesh.apply_translation([0, -self.size[1] / 2, 0])
            if mesh is None:
                mesh = trimesh.creation.box(extents=self.size)
            mesh.apply_transform(self.transform)
        elif self.kind == "cylinder":
            mesh = trimesh.creation.cylinder(radius=self.radius, height=self.height, sections=16)
            # trimesh cylinders run along Z; ours run along Y
            mesh.apply_transform(trimesh.transformations.rotation_matrix(-math.pi / 2, [1, 0, 0]))
            mesh.apply_transform(self.transform)
        elif self.kind == "tube":
            mesh = tube_mesh(self.path, self.radius)
        else:
            return None

        if mesh is None:
            return None
        mesh.metadata["material"] = self.material
        mesh.metadata["element_type"] = self.element_type
        mesh.metadata["source_id"] = self.source_id
        return mesh

    def to_dict(self) -> dict:
        data = {
            "kind": self.kind,
            "position": list(self.position),
            "rotation": list(self.rotation),
            "material": self.material,
            "element_type": self.element_type,
            "source_id": self.source_id,
        }
        if self.kind == "box":
            data["size"] = list(self.size)
            if self.asset:
                data["asset"] = self.asset
        elif self.kind == "cylinder":
            data["radius"] = self.radius
            data["height"] = self.height
        elif self.kind == "tube":
            data["radius"] = self.radius
            data["path"] = [list(p) for p in self.path]
        elif self.kind == "sprite":
            data["label"] = self.label
        return data


@dataclass
class GeneratedPart:
    """Primitives emitted by one generator call plus the material they use."""

    primitives: List[Primitive] = field(default_factory=list)
    tally: MaterialTally = field(default_factory=MaterialTally)

    def __add__(self, other: "GeneratedPart") -> "GeneratedPart":
        if not isinstance(other, GeneratedPart):
            return NotImplemented
        return GeneratedPart(self.primitives + other.primitives, self.tally + other.tally)

    def __len__(self) -> int:
        return len(self.primitives)


@dataclass
class DeckScene:
    """Primitives grouped by element type, ready for a renderer."""

    primitives: Dict[str, List[Primitive]] = field(default_factory=dict)
    colors: Dict[str, Tuple[int, int, int, int]] = field(
        default_factory=lambda: dict(MATERIAL_COLORS)
    )
    metadata: dict = field(default_factory=dict)

    def add(self, primitive: Primitive) -> None:
        """Add a primitive, grouped by element_type."""
        self.primitives.setdefault(primitive.element_type, []).append(primitive)

    def get_by_type(self, element_type: str) -> List[Primitive]:
        return self.primitives.get(element_type, [])

    def get_by_source(self, source_id: str) -> List[Primitive]:
        return [p for p in self.get_all() if p.source_id == source_id]

    def get_all(self) -> List[Primitive]:
        result = []
        for group in self.primitives.values():
            result.extend(group)
        return result

    def count(self) -> int:
        return sum(len(group) for group in self.primitives.values())

    def to_trimesh_scene(self, furniture_library=None) -> trimesh.Scene:
        """Convert to a trimesh Scene, one combined geometry per element type."""
        scene = trimesh.Scene()
        for element_type, group in self.primitives.items():
            meshes = []
            for primitive in group:
                mesh = primitive.to_trimesh(furniture_library)
                if mesh is None or len(mesh.faces) == 0:
                    continue
                color = self.colors.get(primitive.material)
                if color is None:
                    logger.debug(f"No colour for material '{primitive.material}', using fallback")
                    color = FALLBACK_COLOR
                mesh.visual.face_colors = color
                meshes.append(mesh)
            if meshes:
                combined = trimesh.util.concatenate(meshes)
                scene.add_geometry(combined, node_name=element_type, geom_name=element_type)
        return scene

    def export_gltf(self, path: str, binary: bool = True, furniture_library=None) -> None:
        """Export the scene to glTF/GLB."""
        scene = self.to_trimesh_scene(furniture_library)
        scene.export(path, file_type="glb" if binary else "gltf")

    def to_glb_bytes(self, furniture_library=None) -> bytes:
        scene = self.to_trimesh_scene(furniture_library)
        return scene.export(file_type="glb")


def tube_mesh(
    path: Sequence[Sequence[float]], radius: float, sections: int = 12
) -> Optional[trimesh.Trimesh]:
    """Sweep a circular section along a polyline, capped at both ends."""
    points = np.asarray(path, dtype=float)
    if len(points) < 2 or radius <= 0:
        return None

    tangents = np.gradient(points, axis=0)
    norms = np.linalg.norm(tangents, axis=1, keepdims=True)
    norms[norms < 1e-12] = 1.0
    tangents = tangents / norms

    angles = np.linspace(0, 2 * math.pi, sections, endpoint=False)
    rings = []
    for point, tangent in zip(points, tangents):
        ref = _Y_UP if abs(np.dot(tangent, _Y_UP)) < 0.99 else np.array([1.0, 0.0, 0.0])
        n1 = np.cross(tangent, ref)
        n1 /= np.linalg.norm(n1)
        n2 = np.cross(tangent, n1)
        ring = point + radius * (np.outer(np.cos(angles), n1) + np.outer(np.sin(angles), n2))
        rings.append(ring)

    vertices = np.vstack(rings + [points[:1], points[-1:]])
    start_cap = len(vertices) - 2
    end_cap = len(vertices) - 1
    last_ring = (len(points) - 1) * sections

    faces = []
    for i in range(len(points) - 1):
        for j in range(sections):
            a = i * sections + j
            b = i * sections + (j + 1) % sections
            c = (i + 1) * sections + j
            d = (i + 1) * sections + (j + 1) % sections
            faces.append([a, b, d])
            faces.append([a, d, c])
    for j in range(sections):
        faces.append([start_cap, (j + 1) % sections, j])
        faces.append([end_cap, last_ring + j, last_ring + (j + 1) % sections])

    return trimesh.Trimesh(vertices=vertices, faces=np.array(faces), process=False)


def _point(values: Sequence[float]) -> Point3D:
    return (float(values[0]), float(values[1]), float(values[2]))
