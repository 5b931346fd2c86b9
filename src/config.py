# config.py

# 统一管理所有可调整的参数

# 窗口设置
GUI_CONFIG = {
    "resolution": (1024, 768),
    "title": "Taichi Rain Simulation",
    "arch": "gpu",               # "gpu" 或 "cpu"
    "visual_height_scale": 1.0,  # 高度的显示缩放
    "cell_size": 0.1             # 每个网格在画面中的宽度
}

# 水面模拟器设置
WATER_CONFIG = {
    "size_x": 200,
    "size_z": 200,
    "spacing": 0.4,      # 相邻网格点的物理间距
    "wave_speed": 2.0,   # 波速
    "viscosity": 1.0     # 阻尼，0 表示无衰减
}

# 雨滴设置
RAIN_CONFIG = {
    "ripple_height": 1.0,  # 每个雨滴叠加的高度
    "probability": 1.0     # 每帧产生雨滴的概率，1.0 即每帧一滴
}
