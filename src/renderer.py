import taichi as ti
import taichi.math as tm


@ti.data_oriented
class WaterSurfaceMesh:
    def __init__(self, water_sim, visual_height_scale=1.0, cell_size=1.0):
        if water_sim.size_x < 2 or water_sim.size_z < 2:
            raise ValueError(f"surface mesh needs at least 2x2 cells, got {water_sim.size_x}x{water_sim.size_z}")
        self.water_sim = water_sim
        self.visual_height_scale = visual_height_scale
        self.cell_size = cell_size

        self.color_contrast = 2.0
        self.crest_color = ti.Vector([0.6, 0.8, 1.0])
        self.trough_color = ti.Vector([0.2, 0.45, 0.75])

        # 顶点顺序与高度场一致: idx = i * size_z + j
        num_vertices = self.water_sim.num_cells
        self.vertices = ti.Vector.field(3, dtype=ti.f32, shape=num_vertices)
        self.normals = ti.Vector.field(3, dtype=ti.f32, shape=num_vertices)
        self.colors = ti.Vector.field(3, dtype=ti.f32, shape=num_vertices)
        num_triangles = (self.water_sim.size_x - 1) * (self.water_sim.size_z - 1) * 2
        self.indices = ti.field(dtype=ti.i32, shape=num_triangles * 3)
        self.init_indices()

    @ti.kernel
    def init_indices(self):
        for i, j in ti.ndrange(self.water_sim.size_x - 1, self.water_sim.size_z - 1):
            quad_id = (i * (self.water_sim.size_z - 1)) + j
            v_idx_00 = i * self.water_sim.size_z + j
            v_idx_10 = (i + 1) * self.water_sim.size_z + j
            v_idx_01 = i * self.water_sim.size_z + (j + 1)
            v_idx_11 = (i + 1) * self.water_sim.size_z + (j + 1)
            self.indices[quad_id * 6 + 0] = v_idx_00
            self.indices[quad_id * 6 + 1] = v_idx_10
            self.indices[quad_id * 6 + 2] = v_idx_01
            self.indices[quad_id * 6 + 3] = v_idx_10
            self.indices[quad_id * 6 + 4] = v_idx_11
            self.indices[quad_id * 6 + 5] = v_idx_01

    @ti.kernel
    def update_mesh(self, now: ti.i32):
        for i, j in ti.ndrange(self.water_sim.size_x, self.water_sim.size_z):
            idx = i * self.water_sim.size_z + j
            height = self.water_sim.heights[now, idx]
            self.vertices[idx] = ti.Vector([i * self.cell_size,
                                            height * self.visual_height_scale,
                                            j * self.cell_size])

            # 法线用环绕的中心差分，与模拟的拓扑一致
            h_xp = self.water_sim.heights[now, self.water_sim.wrapped(i + 1, j)]
            h_xm = self.water_sim.heights[now, self.water_sim.wrapped(i - 1, j)]
            h_zp = self.water_sim.heights[now, self.water_sim.wrapped(i, j + 1)]
            h_zm = self.water_sim.heights[now, self.water_sim.wrapped(i, j - 1)]
            normal = ti.Vector([(h_xm - h_xp) * self.visual_height_scale,
                                2.0 * self.cell_size,
                                (h_zm - h_zp) * self.visual_height_scale])
            self.normals[idx] = normal.normalized()

            normalized_h = height * self.color_contrast * 0.5 + 0.5
            t = tm.clamp(normalized_h, 0.0, 1.0)
            self.colors[idx] = self.crest_color * t + self.trough_color * (1.0 - t)

    def update(self):
        self.update_mesh(self.water_sim.current_slot)

    def render(self, scene):
        scene.mesh(self.vertices, indices=self.indices, normals=self.normals,
                   per_vertex_color=self.colors, two_sided=True)
