import random


class RainSimulator:
    def __init__(self, water_sim, ripple_height, probability=1.0, rng=None):
        """
        雨滴模拟器
        :param water_sim: 水面模拟器的实例
        :param ripple_height: 每个雨滴叠加到水面上的高度
        :param probability: 每一帧产生一个雨滴的概率 (0.0 到 1.0)，默认每帧一滴
        :param rng: 随机数来源，需提供 randrange() 和 random()，测试时可注入
        """
        if not 0.0 <= probability <= 1.0:
            raise ValueError(f"probability must be within [0, 1], got {probability}")
        self.water_sim = water_sim
        self.ripple_height = ripple_height
        self.probability = probability
        self.rng = rng if rng is not None else random.Random()

    def step(self):
        # 概率为 1 时不额外消耗随机数
        if self.probability < 1.0 and self.rng.random() >= self.probability:
            return None

        # 在整个水面上均匀选择一个点
        rand_x = self.rng.randrange(self.water_sim.size_x)
        rand_z = self.rng.randrange(self.water_sim.size_z)

        self.water_sim.disturb_at(rand_x, rand_z, self.ripple_height)
        return rand_x, rand_z
