import sys

import taichi as ti
from config import GUI_CONFIG, RAIN_CONFIG, WATER_CONFIG
from gui import SimulationGUI
from liquid_simulator import WaterSurfaceSimulator
from renderer import WaterSurfaceMesh


def main():
    ti.init(arch=ti.cpu if GUI_CONFIG["arch"] == "cpu" else ti.gpu)

    try:
        water_sim = WaterSurfaceSimulator(
            WATER_CONFIG["size_x"],
            WATER_CONFIG["size_z"],
            spacing=WATER_CONFIG["spacing"],
            wave_speed=WATER_CONFIG["wave_speed"],
            viscosity=WATER_CONFIG["viscosity"],
            ripple_height=RAIN_CONFIG["ripple_height"],
            rain_probability=RAIN_CONFIG["probability"],
        )
    except ValueError as e:
        print(f"Error: invalid water configuration: {e}")
        return 1

    mesh = WaterSurfaceMesh(
        water_sim,
        visual_height_scale=GUI_CONFIG["visual_height_scale"],
        cell_size=GUI_CONFIG["cell_size"],
    )

    gui = SimulationGUI(
        water_sim=water_sim,
        mesh=mesh,
        resolution=GUI_CONFIG["resolution"],
        title=GUI_CONFIG["title"]
    )
    gui.run()
    return 0


if __name__ == "__main__":
    sys.exit(main())
