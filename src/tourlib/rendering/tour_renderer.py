"""
Tour Renderer

Thin draw layer: flat-shaded model meshes plus one marker cube per POI
anchor. Needs a live ModernGL context.
"""

from __future__ import annotations

import logging
from typing import Dict, List, Optional, Tuple

import moderngl
import numpy as np
from moderngl_window import geometry
from moderngl_window.opengl.vao import VAO
from pyrr import Matrix44

from ..config.settings import (
    ANCHOR_ACTIVE_COLOR,
    ANCHOR_COLOR,
    ANCHOR_MARKER_SIZE,
    CLEAR_COLOR,
    MODEL_COLOR,
)
from ..core.camera import Camera
from ..core.scene import SceneNode
from ..loaders.gltf_loader import MeshData, SceneFragment

logger = logging.getLogger(__name__)


def _mat(matrix) -> bytes:
    return np.asarray(matrix, dtype='f4').tobytes()


class TourRenderer:
    """Draws the tour scene with a single flat-color program."""

    VERTEX_SHADER = """
    #version 410

    in vec3 in_position;

    uniform mat4 model;
    uniform mat4 view;
    uniform mat4 projection;

    out float v_depth;

    void main() {
        vec4 view_pos = view * model * vec4(in_position, 1.0);
        v_depth = -view_pos.z;
        gl_Position = projection * view_pos;
    }
    """

    FRAGMENT_SHADER = """
    #version 410

    in float v_depth;
    out vec4 out_color;

    uniform vec3 color;

    void main() {
        // Cheap depth cue in place of lighting
        float shade = clamp(1.2 - v_depth * 0.02, 0.35, 1.0);
        out_color = vec4(color * shade, 1.0);
    }
    """

    def __init__(self, ctx: moderngl.Context):
        """
        Initialize renderer.

        Args:
            ctx: ModernGL context
        """
        self.ctx = ctx
        self.program = self.ctx.program(
            vertex_shader=self.VERTEX_SHADER,
            fragment_shader=self.FRAGMENT_SHADER,
        )
        self.marker = geometry.cube(size=(ANCHOR_MARKER_SIZE,) * 3)
        self._mesh_vaos: List[Tuple[VAO, Matrix44]] = []
        self._uploaded_fragment: Optional[SceneFragment] = None

    def upload_model(self, fragment: SceneFragment) -> None:
        """Create VAOs for every mesh of a scene fragment."""
        self.release_model()
        for mesh in fragment.meshes:
            vao = self._create_vao(mesh)
            if vao is not None:
                self._mesh_vaos.append((vao, mesh.world_transform))
        self._uploaded_fragment = fragment
        logger.info("Uploaded %d meshes for '%s'", len(self._mesh_vaos), fragment.name)

    @staticmethod
    def _create_vao(mesh: MeshData) -> Optional[VAO]:
        positions = mesh.positions
        if mesh.indices is not None:
            # moderngl_window VAO has no index buffer here; expand instead
            positions = positions[mesh.indices.astype('i4')]
        if len(positions) == 0:
            return None

        vao = VAO(name=mesh.name, mode=moderngl.TRIANGLES)
        vao.buffer(np.ascontiguousarray(positions, dtype='f4'), '3f', ['in_position'])
        return vao

    def render(
        self,
        camera: Camera,
        model_node: Optional[SceneNode],
        anchors: Dict[str, SceneNode],
        active_poi_id: Optional[str] = None,
    ) -> None:
        """
        Render one frame.

        Args:
            camera: Camera supplying view/projection
            model_node: Scene node carrying the loaded fragment (None before readiness)
            anchors: POI anchor nodes keyed by POI id
            active_poi_id: Currently active POI, drawn highlighted
        """
        self.ctx.clear(*CLEAR_COLOR)
        self.ctx.enable(moderngl.DEPTH_TEST)

        if model_node is None:
            return

        if model_node.payload is not self._uploaded_fragment:
            self.upload_model(model_node.payload)

        self.program['view'].write(_mat(camera.get_view_matrix()))
        self.program['projection'].write(_mat(camera.get_projection_matrix()))

        model_world = model_node.get_world_matrix()
        self.program['color'].value = MODEL_COLOR
        for vao, mesh_transform in self._mesh_vaos:
            self.program['model'].write(_mat(mesh_transform @ model_world))
            vao.render(self.program)

        for poi_id, anchor in anchors.items():
            color = ANCHOR_ACTIVE_COLOR if poi_id == active_poi_id else ANCHOR_COLOR
            self.program['color'].value = color
            self.program['model'].write(_mat(anchor.get_world_matrix()))
            self.marker.render(self.program)

    def release_model(self) -> None:
        for vao, _ in self._mesh_vaos:
            vao.release()
        self._mesh_vaos.clear()
        self._uploaded_fragment = None

    def release(self) -> None:
        """Release GPU resources."""
        self.release_model()
        self.marker.release()
        self.program.release()
