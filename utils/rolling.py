import random
from typing import List


def roll(count: int, faces: int) -> List[int]:
    """擲 count 個 faces 面骰，返回每顆骰子的點數"""
    if count < 1 or faces < 1:
        raise ValueError(f"無效的擲骰參數: {count}D{faces}")

    return [random.randint(1, faces) for _ in range(count)]
