import taichi as ti
import math
from collections import namedtuple

import numpy as np

from rain import RainSimulator


# 稳定时间步相对于 Courant 上界的安全系数
TIME_STEP_FACTOR = 0.22

WaveCoefficients = namedtuple("WaveCoefficients", ["c1", "c2", "c3", "time_step"])


class SimulationConfigError(ValueError):
    pass


def wrap_index(x, z, size_x, size_z):
    """把任意整数坐标 (x, z) 环绕到网格内，返回线性下标 (x 优先, 行长为 size_z)"""
    i = (x % size_x + size_x) % size_x
    j = (z % size_z + size_z) % size_z
    return i * size_z + j


def validate_parameters(size_x, size_z, spacing, wave_speed, viscosity):
    if size_x <= 0:
        raise SimulationConfigError(f"size_x must be positive, got {size_x}")
    if size_z <= 0:
        raise SimulationConfigError(f"size_z must be positive, got {size_z}")
    if spacing <= 0:
        raise SimulationConfigError(f"spacing must be positive, got {spacing}")
    if wave_speed <= 0:
        raise SimulationConfigError(f"wave_speed must be positive, got {wave_speed}")
    if viscosity < 0:
        raise SimulationConfigError(f"viscosity must be non-negative, got {viscosity}")


def derive_coefficients(spacing, wave_speed, viscosity):
    """
    由物理参数计算显式差分格式的三个系数
    :param spacing: 相邻网格点间距 h
    :param wave_speed: 波速 v
    :param viscosity: 阻尼 mu
    :return: WaveCoefficients(c1, c2, c3, time_step)
    """
    speed_sq = wave_speed * wave_speed
    spacing_sq = spacing * spacing

    time_condition = (viscosity + math.sqrt(viscosity * viscosity + 32.0 * speed_sq / spacing_sq)) \
        / (8.0 * speed_sq / spacing_sq)
    time_step = TIME_STEP_FACTOR * time_condition
    d = viscosity * time_step + 2.0

    c1 = (4.0 - 8.0 * speed_sq * time_step * time_step / spacing_sq) / d
    c2 = (viscosity * time_step - 2.0) / d
    c3 = (2.0 * speed_sq * time_step * time_step / spacing_sq) / d
    return WaveCoefficients(c1, c2, c3, time_step)


@ti.data_oriented
class WaterSurfaceSimulator:
    def __init__(self, size_x, size_z, spacing=1.0, wave_speed=1.0, viscosity=0.0,
                 ripple_height=1.0, rain_probability=1.0, rng=None, dtype=ti.f32):
        validate_parameters(size_x, size_z, spacing, wave_speed, viscosity)

        self.size_x = size_x
        self.size_z = size_z
        self.num_cells = size_x * size_z
        self.spacing = spacing
        self.wave_speed = wave_speed
        self.viscosity = viscosity

        # 三代高度场共用一块存储: heights[slot, idx]，只轮换 slot 编号
        self.heights = ti.field(dtype=dtype, shape=(3, self.num_cells))
        self.np_dtype = np.float64 if dtype == ti.f64 else np.float32
        self.coefficient_values = ti.field(dtype=dtype, shape=3)
        self.coefficients = None
        self.set_coefficients(derive_coefficients(spacing, wave_speed, viscosity))

        self.rain = RainSimulator(self, ripple_height, probability=rain_probability, rng=rng)

        self.slots = (0, 1, 2)
        self.tick = 0
        self.init_height_field()

    @property
    def time_step(self):
        return self.coefficients.time_step

    @property
    def previous_slot(self):
        return self.slots[0]

    @property
    def current_slot(self):
        return self.slots[1]

    @property
    def next_slot(self):
        return self.slots[2]

    @property
    def elapsed_time(self):
        return self.tick * self.time_step

    def set_coefficients(self, coefficients):
        self.coefficients = coefficients
        self.coefficient_values[0] = coefficients.c1
        self.coefficient_values[1] = coefficients.c2
        self.coefficient_values[2] = coefficients.c3

    def reconfigure(self, spacing=None, wave_speed=None, viscosity=None):
        spacing = self.spacing if spacing is None else spacing
        wave_speed = self.wave_speed if wave_speed is None else wave_speed
        viscosity = self.viscosity if viscosity is None else viscosity
        validate_parameters(self.size_x, self.size_z, spacing, wave_speed, viscosity)

        self.spacing = spacing
        self.wave_speed = wave_speed
        self.viscosity = viscosity
        self.set_coefficients(derive_coefficients(spacing, wave_speed, viscosity))

    def index(self, x, z):
        return wrap_index(x, z, self.size_x, self.size_z)

    @ti.kernel
    def clear_buffers(self):
        for s, i in self.heights:
            self.heights[s, i] = 0.0

    def init_height_field(self):
        self.clear_buffers()
        self.slots = (0, 1, 2)
        self.tick = 0

    def reset(self):
        self.init_height_field()

    @ti.func
    def wrapped(self, x, z):
        i = (x % self.size_x + self.size_x) % self.size_x
        j = (z % self.size_z + self.size_z) % self.size_z
        return i * self.size_z + j

    def disturb_at(self, x, z, strength):
        # Python 作用域按字段自身的精度累加
        self.heights[self.current_slot, self.index(x, z)] += strength

    # --- 五点模板: 只读 prev/now，只写 nxt ---
    @ti.kernel
    def wave_propagate(self, prev: ti.i32, now: ti.i32, nxt: ti.i32):
        c1 = self.coefficient_values[0]
        c2 = self.coefficient_values[1]
        c3 = self.coefficient_values[2]
        for x, z in ti.ndrange(self.size_x, self.size_z):
            idx0 = self.wrapped(x, z)
            idx1 = self.wrapped(x + 1, z)
            idx2 = self.wrapped(x - 1, z)
            idx3 = self.wrapped(x, z + 1)
            idx4 = self.wrapped(x, z - 1)
            self.heights[nxt, idx0] = c1 * self.heights[now, idx0] + \
                c2 * self.heights[prev, idx0] + \
                c3 * (self.heights[now, idx1] + self.heights[now, idx2] +
                      self.heights[now, idx3] + self.heights[now, idx4])

    def rotate_buffers(self):
        prev, now, nxt = self.slots
        self.slots = (now, nxt, prev)

    def advance(self, rain=True):
        """推进一帧但不导出高度，供每帧只读 GPU 数据的渲染循环使用"""
        if rain:
            self.rain.step()
        self.wave_propagate(*self.slots)
        self.rotate_buffers()
        self.tick += 1

    def propagate(self):
        self.advance(rain=False)
        return self.current_heights()

    def step(self):
        self.advance()
        return self.current_heights()

    @ti.kernel
    def export_slot(self, slot: ti.i32, out: ti.types.ndarray()):
        for i in range(self.num_cells):
            out[i] = self.heights[slot, i]

    def current_heights(self):
        # 只拷贝当前这一代
        view = np.empty(self.num_cells, dtype=self.np_dtype)
        self.export_slot(self.current_slot, view)
        view.setflags(write=False)
        return view

    def height_at(self, x, z):
        return float(self.heights[self.current_slot, self.index(x, z)])

    def height_grid(self):
        return np.reshape(self.current_heights(), (self.size_x, self.size_z))
