"""
GLTF/GLB Loader

Parses GLTF documents into CPU-side scene fragments (node hierarchy, mesh
positions and bounds). GPU upload is left to the renderer.
"""

from __future__ import annotations

import asyncio
import base64
import struct
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Tuple

import numpy as np
import pygltflib
from pyrr import Matrix44, Quaternion

from .base import Loadable
from .descriptors import ResourceDescriptor, ResourceKind
from .errors import DecodeError

GLB_MAGIC = b"glTF"
_GLB_JSON_CHUNK = 0x4E4F534A
_GLB_BIN_CHUNK = 0x004E4942

_COMPONENT_DTYPES = {
    5120: np.int8,     # BYTE
    5121: np.uint8,    # UNSIGNED_BYTE
    5122: np.int16,    # SHORT
    5123: np.uint16,   # UNSIGNED_SHORT
    5125: np.uint32,   # UNSIGNED_INT
    5126: np.float32,  # FLOAT
}

_COMPONENT_COUNTS = {
    'SCALAR': 1,
    'VEC2': 2,
    'VEC3': 3,
    'VEC4': 4,
    'MAT2': 4,
    'MAT3': 9,
    'MAT4': 16,
}


@dataclass
class FragmentNode:
    """A node of the loaded hierarchy with its accumulated transform."""

    index: int
    name: str
    local_transform: Matrix44
    world_transform: Matrix44
    mesh_index: Optional[int] = None
    children: List[int] = field(default_factory=list)


@dataclass
class MeshData:
    """Vertex positions (local to the owning node) for one primitive."""

    name: str
    node_index: int
    positions: np.ndarray            # (N, 3) float32
    indices: Optional[np.ndarray]    # (M,) uint32 or None
    world_transform: Matrix44

    @property
    def vertex_count(self) -> int:
        return int(self.positions.shape[0])

    def world_positions(self) -> np.ndarray:
        homogeneous = np.hstack([self.positions, np.ones((self.vertex_count, 1), dtype='f4')])
        return (homogeneous @ np.array(self.world_transform, dtype='f4'))[:, :3]


@dataclass
class SceneFragment:
    """In-memory result of parsing one GLTF document."""

    name: str
    nodes: List[FragmentNode]
    meshes: List[MeshData]
    root_nodes: List[int] = field(default_factory=list)
    bounding_radius: float = 1.0

    def find_node(self, name: str) -> Optional[FragmentNode]:
        for node in self.nodes:
            if node.name == name:
                return node
        return None


def split_glb(data: bytes) -> Tuple[str, Optional[bytes]]:
    """
    Split a binary GLTF container into its JSON text and BIN chunk.

    Raises:
        ValueError: If the container is truncated or has no JSON chunk
    """
    if len(data) < 12:
        raise ValueError("GLB header truncated")
    magic, version, length = struct.unpack_from("<4sII", data, 0)
    if magic != GLB_MAGIC:
        raise ValueError("Not a GLB container")
    if version != 2:
        raise ValueError(f"Unsupported GLB version {version}")

    json_text = None
    blob = None
    offset = 12
    end = min(length, len(data))
    while offset + 8 <= end:
        chunk_length, chunk_type = struct.unpack_from("<II", data, offset)
        chunk = data[offset + 8:offset + 8 + chunk_length]
        if len(chunk) != chunk_length:
            raise ValueError("GLB chunk truncated")
        if chunk_type == _GLB_JSON_CHUNK:
            json_text = chunk.decode("utf-8")
        elif chunk_type == _GLB_BIN_CHUNK and blob is None:
            blob = chunk
        offset += 8 + chunk_length

    if json_text is None:
        raise ValueError("GLB container has no JSON chunk")
    return json_text, blob


class GltfLoader(Loadable):
    """
    Loads GLTF (JSON + external/embedded buffers) and GLB models.
    """

    kind = ResourceKind.MODEL

    async def load(self, descriptor: ResourceDescriptor) -> SceneFragment:
        location = self.transport.resolve(descriptor.location)
        data = await self.transport.fetch(location)
        gltf, blob = await asyncio.to_thread(self._parse_document, data)

        buffers: List[bytes] = []
        for buffer in gltf.buffers:
            uri = buffer.uri
            if uri is None or uri.startswith("data:"):
                buffers.append(self._inline_buffer(uri, blob))
            else:
                buffers.append(await self.transport.fetch(self.transport.resolve(uri, relative_to=location)))

        return await asyncio.to_thread(self._build_fragment, gltf, buffers, descriptor)

    def decode(self, data: bytes, descriptor: ResourceDescriptor) -> SceneFragment:
        """Decode a self-contained document (GLB or data-URI buffers only)."""
        gltf, blob = self._parse_document(data)
        buffers = []
        for buffer in gltf.buffers:
            if buffer.uri is not None and not buffer.uri.startswith("data:"):
                raise DecodeError(f"External buffer '{buffer.uri}' needs a transport fetch")
            buffers.append(self._inline_buffer(buffer.uri, blob))
        return self._build_fragment(gltf, buffers, descriptor)

    def _parse_document(self, data: bytes) -> Tuple[pygltflib.GLTF2, Optional[bytes]]:
        try:
            if data[:4] == GLB_MAGIC:
                json_text, blob = split_glb(data)
            else:
                json_text, blob = data.decode("utf-8"), None
            gltf = pygltflib.GLTF2.from_json(json_text, infer_missing=True)
        except (UnicodeDecodeError, ValueError, KeyError, TypeError, AttributeError) as exc:
            raise DecodeError(f"Invalid GLTF document: {exc}") from exc
        return gltf, blob

    @staticmethod
    def _inline_buffer(uri: Optional[str], blob: Optional[bytes]) -> bytes:
        if uri is None:
            if blob is None:
                raise DecodeError("Buffer without URI but no GLB binary chunk")
            return blob
        try:
            _, encoded = uri.split(",", 1)
            return base64.b64decode(encoded)
        except ValueError as exc:
            raise DecodeError(f"Malformed data URI buffer: {exc}") from exc

    def _build_fragment(
        self,
        gltf: pygltflib.GLTF2,
        buffers: List[bytes],
        descriptor: ResourceDescriptor,
    ) -> SceneFragment:
        try:
            nodes: Dict[int, FragmentNode] = {}
            meshes: List[MeshData] = []

            scene_idx = gltf.scene if gltf.scene is not None else 0
            if gltf.scenes and scene_idx < len(gltf.scenes):
                roots = list(gltf.scenes[scene_idx].nodes or [])
            else:
                # No scene: treat every node that is nobody's child as a root
                children = {c for node in gltf.nodes for c in (node.children or [])}
                roots = [i for i in range(len(gltf.nodes)) if i not in children]

            for node_idx in roots:
                self._process_node(gltf, buffers, node_idx, Matrix44.identity(), nodes, meshes)

            fragment = SceneFragment(
                name=descriptor.name,
                nodes=[nodes[i] for i in sorted(nodes)],
                meshes=meshes,
                root_nodes=roots,
            )
            fragment.bounding_radius = self._calculate_bounding_radius(meshes)
            return fragment
        except (IndexError, KeyError, ValueError, TypeError) as exc:
            raise DecodeError(f"Malformed GLTF scene data: {exc}") from exc

    def _process_node(self, gltf, buffers, node_idx, parent_transform, nodes, meshes):
        """Recursively collect nodes and meshes, accumulating transforms."""
        if node_idx in nodes:
            raise ValueError(f"Node {node_idx} referenced twice (cycle or shared child)")

        node = gltf.nodes[node_idx]
        local_transform = self._get_node_transform(node)
        world_transform = local_transform @ parent_transform

        nodes[node_idx] = FragmentNode(
            index=node_idx,
            name=node.name or f"Node_{node_idx}",
            local_transform=local_transform,
            world_transform=world_transform,
            mesh_index=node.mesh,
            children=list(node.children or []),
        )

        if node.mesh is not None:
            gltf_mesh = gltf.meshes[node.mesh]
            for prim_idx, primitive in enumerate(gltf_mesh.primitives):
                position_idx = getattr(primitive.attributes, "POSITION", None)
                if position_idx is None:
                    continue
                positions = self._get_accessor_data(gltf, buffers, position_idx).reshape(-1, 3)
                indices = None
                if primitive.indices is not None:
                    indices = self._get_accessor_data(gltf, buffers, primitive.indices).astype(np.uint32)
                meshes.append(MeshData(
                    name=f"{node.name or gltf_mesh.name or 'Mesh'}_{prim_idx}",
                    node_index=node_idx,
                    positions=positions.astype('f4'),
                    indices=indices,
                    world_transform=world_transform,
                ))

        for child_idx in node.children or []:
            self._process_node(gltf, buffers, child_idx, world_transform, nodes, meshes)

    @staticmethod
    def _get_node_transform(node) -> Matrix44:
        """Local transform from a node's matrix or TRS (row-major, pyrr order)."""
        if node.matrix is not None and len(node.matrix) == 16:
            # Column-major GLTF storage reshapes straight into pyrr row-vector layout
            matrix = np.array(node.matrix, dtype='f4').reshape(4, 4)
            return Matrix44(matrix)

        matrix = Matrix44.identity()
        if node.scale is not None:
            matrix = matrix @ Matrix44.from_scale(node.scale[:3])
        if node.rotation is not None:
            # GLTF and pyrr both store quaternions as [x, y, z, w]; from_quaternion
            # is column-vector, so transpose it for row vectors
            rotation = Matrix44.from_quaternion(Quaternion(list(node.rotation)))
            matrix = matrix @ Matrix44(rotation.T)
        if node.translation is not None:
            matrix = matrix @ Matrix44.from_translation(node.translation[:3])
        return matrix

    @staticmethod
    def _get_accessor_data(gltf, buffers: List[bytes], accessor_idx: int) -> np.ndarray:
        accessor = gltf.accessors[accessor_idx]
        dtype = np.dtype(_COMPONENT_DTYPES[accessor.componentType])
        component_count = _COMPONENT_COUNTS[accessor.type]

        if accessor.bufferView is None:
            return np.zeros(accessor.count * component_count, dtype='f4')

        buffer_view = gltf.bufferViews[accessor.bufferView]
        buffer_data = buffers[buffer_view.buffer]

        offset = (buffer_view.byteOffset or 0) + (accessor.byteOffset or 0)
        stride = buffer_view.byteStride or 0
        element_size = dtype.itemsize * component_count

        if stride == 0 or stride == element_size:
            data = buffer_data[offset:offset + accessor.count * element_size]
        else:
            data = bytearray()
            for i in range(accessor.count):
                element_offset = offset + i * stride
                data.extend(buffer_data[element_offset:element_offset + element_size])

        if len(data) != accessor.count * element_size:
            raise ValueError(f"Accessor {accessor_idx} reads past the end of its buffer")

        return np.frombuffer(bytes(data), dtype=dtype).astype('f4')

    @staticmethod
    def _calculate_bounding_radius(meshes: List[MeshData]) -> float:
        max_radius = 0.0
        for mesh in meshes:
            if mesh.vertex_count == 0:
                continue
            max_radius = max(max_radius, float(np.linalg.norm(mesh.world_positions(), axis=1).max()))
        return max_radius if max_radius > 0 else 1.0
