import taichi as ti


class SimulationGUI:
    def __init__(self, water_sim, mesh, resolution, title):
        self.water_sim = water_sim
        self.mesh = mesh
        self.resolution = resolution

        self.is_raining = True
        self.is_paused = False

        self.window = ti.ui.Window(title, resolution, vsync=True)
        self.canvas = self.window.get_canvas()
        self.canvas.set_background_color((0.67, 0.67, 0.67))
        self.camera = ti.ui.Camera()
        self.mesh.update()
        self.reset_camera()
        print(f"[WaterSurface] Initialized {self.water_sim.size_x}x{self.water_sim.size_z}, "
              f"time step {self.water_sim.time_step:.4f}")

    def reset_camera(self):
        center_x = (self.water_sim.size_x - 1) * self.mesh.cell_size * 0.5
        center_z = (self.water_sim.size_z - 1) * self.mesh.cell_size * 0.5
        extent = max(center_x, center_z)
        self.camera.position(center_x, extent * 1.2, center_z + extent * 2.0)
        self.camera.lookat(center_x, 0.0, center_z)
        self.camera.up(0, 1, 0)
        self.camera.fov = 75

    def render(self, scene):
        scene.set_camera(self.camera)
        scene.point_light(pos=(0.0, 10.0, 0.0), color=(0.67, 0.67, 0.67))
        scene.ambient_light((0.5, 0.5, 0.5))
        self.mesh.render(scene)

    def advance(self):
        self.water_sim.advance(rain=self.is_raining)
        self.mesh.update()

    def run(self):
        scene = self.window.get_scene()
        while self.window.running:
            if self.window.get_event(ti.ui.PRESS):
                if self.window.event.key == 'r':  # 按 'r' 键
                    self.is_raining = not self.is_raining  # 切换下雨状态
                    print(f"[WaterSurface] Rain {'on' if self.is_raining else 'off'}")
                if self.window.event.key == ti.ui.SPACE:
                    self.is_paused = not self.is_paused

            if not self.is_paused:
                self.advance()

            self.render(scene)
            self.canvas.scene(scene)
            self.window.show()
